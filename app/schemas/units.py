from datetime import datetime
from typing import Optional

from pydantic import Field

from app.schemas.common import CamelModel
from app.schemas.students import PersonSummary


class UnitCreate(CamelModel):
    unit_code: str = Field(min_length=1)
    unit_name: str = Field(min_length=1)
    staff_id: str = Field(min_length=1)


class UnitUpdate(CamelModel):
    new_staff_id: Optional[str] = None
    new_unit_code: Optional[str] = None
    new_unit_name: Optional[str] = None


class UnitSummary(CamelModel):
    unit_code: str
    unit_name: str
    staff_id: str


class UnitOut(UnitSummary):
    created_at: datetime
    updated_at: datetime
    staff: Optional[PersonSummary] = None
