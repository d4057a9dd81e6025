from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from app.models.base import Base


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("student_id", "unit_code", "session", name="uq_enrollment_scope"),
    )

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
    session: str = Column(String, nullable=False)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: datetime = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
