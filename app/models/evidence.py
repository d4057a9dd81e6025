from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from app.models.base import Base


class EvidenceType(str, Enum):
    IMAGE = "image"
    VIDEO = "video"
    UNKNOWN = "unknown"


class Evidence(Base):
    __tablename__ = "evidence"

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
    # Public-relative path of the stored file; the file itself outlives the row.
    filename: str = Column(String, nullable=False)
    original_name: str = Column(String, nullable=False)
    evidence_type: str = Column(String, nullable=False, default=EvidenceType.UNKNOWN.value)
    description: Optional[str] = Column(Text, nullable=True)
    uploaded_at: datetime = Column(DateTime, default=datetime.utcnow, nullable=False)
