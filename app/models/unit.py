from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, String

from app.models.base import Base


class Unit(Base):
    __tablename__ = "units"

    unit_code: str = Column(String, primary_key=True)
    unit_name: str = Column(String, unique=True, nullable=False)
    staff_id: str = Column(
        String,
        ForeignKey("users.user_id", ondelete="CASCADE", onupdate="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: datetime = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: datetime = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
