"""Typed query filters.

Query-string values are parsed here, before any query is built: blank strings
and the literal ``"undefined"`` some clients send count as absent.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from app.models.user import Gender


class _QueryFilter(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value or value == "undefined":
                return None
        return value


class StudentFilter(_QueryFilter):
    department: Optional[str] = None
    level: Optional[str] = None
    gender: Optional[Gender] = None


class UnitFilter(_QueryFilter):
    unit_code: Optional[str] = None
    unit_name: Optional[str] = None
    staff_id: Optional[str] = None


class EnrollmentFilter(_QueryFilter):
    student_id: Optional[str] = None
    unit_code: Optional[str] = None
    session: Optional[str] = None
