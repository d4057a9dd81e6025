from typing import Optional

from pydantic import EmailStr, Field, field_validator

from app.models.user import Gender, UserRole
from app.schemas.common import CamelModel


class LoginRequest(CamelModel):
    user_id: str = Field(min_length=1)
    password: str = Field(min_length=1)


class RegisterForm(CamelModel):
    user_id: str = Field(min_length=2)
    email: EmailStr
    firstname: str = Field(min_length=2)
    lastname: str = Field(min_length=2)
    gender: Gender
    department: str = Field(min_length=2)
    level: Optional[str] = None
    role: UserRole
    password: Optional[str] = None

    @field_validator("role")
    @classmethod
    def self_service_roles(cls, value: UserRole) -> UserRole:
        if value not in (UserRole.STUDENT, UserRole.STAFF):
            raise ValueError("role must be student or staff")
        return value

    @field_validator("level", "password", mode="before")
    @classmethod
    def blank_is_absent(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class RegisteredUser(CamelModel):
    user_id: str
    email: str
    role: UserRole


class SessionOut(CamelModel):
    """Login/refresh payload: the access token plus public profile fields."""

    access_token: str
    user_id: str
    id: str
    role: UserRole
    email: str
    firstname: str
    lastname: str
    profile_pic: str
