from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String

from app.models.base import Base

SCORE_FIELDS = ("theory1", "theory2", "theory3", "prac1", "prac2", "prac3")


class Marks(Base):
    __tablename__ = "marks"

    id: int = Column(Integer, primary_key=True, autoincrement=True)
    student_id: str = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    unit_code: str = Column(
        String,
        ForeignKey("units.unit_code", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    theory1: Optional[int] = Column(Integer, nullable=True)
    theory2: Optional[int] = Column(Integer, nullable=True)
    theory3: Optional[int] = Column(Integer, nullable=True)
    prac1: Optional[int] = Column(Integer, nullable=True)
    prac2: Optional[int] = Column(Integer, nullable=True)
    prac3: Optional[int] = Column(Integer, nullable=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: datetime = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
