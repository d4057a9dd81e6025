import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import Column, DateTime, Enum as SqlEnum, String

from app.models.base import Base


class UserRole(str, Enum):
    STUDENT = "student"
    STAFF = "staff"
    ADMIN = "admin"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"


def _values(enum_cls) -> list[str]:
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id: str = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: str = Column(String, unique=True, nullable=False, index=True)
    email: str = Column(String, unique=True, nullable=False, index=True)
    hashed_password: str = Column(String, nullable=False)
    firstname: str = Column(String, nullable=False)
    lastname: str = Column(String, nullable=False)
    gender: Gender = Column(SqlEnum(Gender, name="genders", native_enum=False, values_callable=_values), nullable=False)
    level: Optional[str] = Column(String, nullable=True)
    department: str = Column(String, nullable=False)
    role: UserRole = Column(SqlEnum(UserRole, name="user_roles", native_enum=False, values_callable=_values), nullable=False)
    profile_pic: str = Column(String, nullable=False)
    # The single live refresh token; cleared at logout, overwritten at login.
    refresh_token: Optional[str] = Column(String, nullable=True, index=True)
    created_at: datetime = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: datetime = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
