from datetime import datetime
from typing import Optional

from pydantic import EmailStr, field_validator

from app.models.user import Gender, UserRole
from app.schemas.common import CamelModel


class StudentOut(CamelModel):
    id: str
    user_id: str
    email: str
    firstname: str
    lastname: str
    gender: Gender
    level: Optional[str] = None
    department: str
    role: UserRole
    profile_pic: str
    created_at: datetime
    updated_at: datetime


class StudentUpdate(CamelModel):
    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    gender: Optional[Gender] = None
    department: Optional[str] = None
    level: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PersonSummary(CamelModel):
    user_id: str
    firstname: str
    lastname: str
    email: str
