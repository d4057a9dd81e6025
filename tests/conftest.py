import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", "")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.config import settings
from app.core.database import get_db
from app.core.security import create_access_token, hash_password
from app.main import create_app
from app.models.base import Base
from app.models.user import Gender, User, UserRole

TEST_DATABASE_URL = "sqlite://"
engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "storage_root", str(tmp_path))
    return tmp_path


@pytest.fixture
def db() -> Generator[Session, None, None]:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    application = create_app()
    application.dependency_overrides[get_db] = override_get_db
    with TestClient(application) as test_client:
        yield test_client


@pytest.fixture
def make_user(db):
    def _make_user(user_id: str, role: UserRole = UserRole.STUDENT, password: str = "correct", **fields) -> User:
        user = User(
            user_id=user_id,
            email=fields.pop("email", f"{user_id}@example.com"),
            hashed_password=hash_password(password),
            firstname=fields.pop("firstname", "Ada"),
            lastname=fields.pop("lastname", "Lovelace"),
            gender=fields.pop("gender", Gender.FEMALE),
            department=fields.pop("department", "Computing"),
            level=fields.pop("level", "200"),
            role=role,
            profile_pic=fields.pop("profile_pic", "profilePic/default.png"),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id: str, role: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id, role)}"}

    return _auth_headers
