from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary


class EnrollmentCreate(CamelModel):
    student_id: str = Field(min_length=1)
    unit_code: str = Field(min_length=1)
    session: str = Field(min_length=1)


class EnrollmentUpdate(CamelModel):
    student_id: Optional[str] = None
    unit_code: Optional[str] = None
    session: Optional[str] = None


class EnrollmentOut(CamelModel):
    id: int
    student_id: str
    unit_code: str
    session: str
    created_at: datetime
    updated_at: datetime
    student: Optional[PersonSummary] = None
    unit: Optional[UnitSummary] = None
