from typing import Optional

from fastapi import APIRouter, Depends, Form, Response, status
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.routers.deps import parse_model, profile_pic_file, refresh_cookie
from app.schemas.auth import LoginRequest, RegisteredUser, RegisterForm, SessionOut
from app.schemas.common import ok
from app.services.auth import AuthService
from app.services.uploads import IncomingFile

router = APIRouter(prefix="/api/auth", tags=["auth"])
auth_service = AuthService()


def _set_refresh_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.refresh_cookie_name,
        value=token,
        max_age=settings.refresh_cookie_max_age,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def _clear_refresh_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.refresh_cookie_name,
        path=settings.refresh_cookie_path,
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )


def _session_out(user, access_token: str) -> SessionOut:
    return SessionOut(
        access_token=access_token,
        user_id=user.user_id,
        id=user.id,
        role=user.role,
        email=user.email,
        firstname=user.firstname,
        lastname=user.lastname,
        profile_pic=user.profile_pic,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(
    user_id: str = Form(..., alias="userId"),
    email: str = Form(...),
    firstname: str = Form(...),
    lastname: str = Form(...),
    gender: str = Form(...),
    department: str = Form(...),
    role: str = Form(...),
    level: Optional[str] = Form(None),
    password: Optional[str] = Form(None),
    profile_pic: Optional[IncomingFile] = Depends(profile_pic_file),
    db: Session = Depends(get_db),
) -> dict:
    form = parse_model(
        RegisterForm,
        {
            "userId": user_id,
            "email": email,
            "firstname": firstname,
            "lastname": lastname,
            "gender": gender,
            "department": department,
            "role": role,
            "level": level,
            "password": password,
        },
    )
    user = auth_service.register_user(db, form, profile_pic)
    return ok(RegisteredUser.model_validate(user), message="User registered successfully")


@router.post("/login")
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)) -> dict:
    user, access, refresh = auth_service.authenticate(db, credentials)
    _set_refresh_cookie(response, refresh)
    return ok(_session_out(user, access), message="Login successful")


@router.post("/refresh-token")
def refresh_token(token: Optional[str] = Depends(refresh_cookie), db: Session = Depends(get_db)) -> dict:
    user, access = auth_service.refresh_access_token(db, token)
    return ok(_session_out(user, access))


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(token: Optional[str] = Depends(refresh_cookie), db: Session = Depends(get_db)) -> Response:
    auth_service.logout(db, token)
    response = Response(status_code=status.HTTP_204_NO_CONTENT)
    _clear_refresh_cookie(response)
    return response
