import hmac
from functools import lru_cache
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import (
    ConflictError,
    InvalidCredentials,
    InvalidToken,
    InvalidOrExpiredToken,
    MissingFile,
    MissingToken,
    TokenMismatch,
    UserNotFound,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from app.models.user import User
from app.repositories.user_repository import UserRepository
from app.schemas.auth import LoginRequest, RegisterForm
from app.services.uploads import IncomingFile, UploadService


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    # Verified against when the identity is unknown so both failure paths cost one bcrypt round.
    return hash_password("not-a-real-password")


class AuthService:
    """Session lifecycle: register, login, refresh and logout.

    A user holds at most one live refresh token, stored on the user row. Login
    overwrites it, logout clears it, and refresh only accepts the exact stored
    value. Refresh never rotates the refresh token.
    """

    def __init__(
        self,
        user_repo: UserRepository | None = None,
        uploads: UploadService | None = None,
        audit: AuditLogger | None = None,
    ):
        self.user_repo = user_repo or UserRepository()
        self.uploads = uploads or UploadService()
        self.audit = audit or AuditLogger()

    def register_user(self, db: Session, form: RegisterForm, profile_pic: Optional[IncomingFile]) -> User:
        if self.user_repo.find_by_user_id_or_email(db, form.user_id, str(form.email)):
            raise ConflictError("UserId or email already exists")
        if profile_pic is None or not profile_pic.data:
            raise MissingFile("Profile image required")

        profile_path = self.uploads.store_profile_picture(profile_pic)
        try:
            user = self.user_repo.create(
                db,
                user_id=form.user_id,
                email=str(form.email),
                # Accounts created without a password start with their userId as password.
                hashed_password=hash_password(form.password or form.user_id),
                firstname=form.firstname,
                lastname=form.lastname,
                gender=form.gender,
                department=form.department,
                level=form.level,
                role=form.role,
                profile_pic=profile_path,
            )
        except Exception:
            self.uploads.discard(profile_path)
            raise
        self.audit.audit(
            "CREATE_USER",
            resource_type="User",
            resource_id=user.user_id,
            result="SUCCESS",
        )
        return user

    def authenticate(self, db: Session, credentials: LoginRequest) -> Tuple[User, str, str]:
        identifier = credentials.user_id
        user = self.user_repo.find_by_user_id_or_email(db, identifier, identifier)

        hashed = user.hashed_password if user else _dummy_hash()
        password_ok = verify_password(credentials.password, hashed)
        if user is None or not password_ok:
            self.audit.audit(
                "USER_LOGIN",
                resource_type="User",
                resource_id=identifier,
                result="FAILURE",
                failure_reason="Invalid credentials",
            )
            raise InvalidCredentials()

        role = user.role.value
        access = create_access_token(user.user_id, role)
        refresh = create_refresh_token(user.user_id, role)
        user.refresh_token = refresh
        self.user_repo.save(db, user)

        self.audit.audit("USER_LOGIN", resource_type="User", resource_id=user.user_id, result="SUCCESS")
        return user, access, refresh

    def refresh_access_token(self, db: Session, refresh_token: Optional[str]) -> Tuple[User, str]:
        if not refresh_token:
            raise MissingToken()

        try:
            claims = decode_refresh_token(refresh_token)
        except InvalidToken as exc:
            raise InvalidOrExpiredToken() from exc

        user = self.user_repo.find_by_user_id(db, claims.user_id)
        if user is None:
            raise UserNotFound()

        stored = user.refresh_token
        if not stored or not hmac.compare_digest(stored.encode("utf-8"), refresh_token.encode("utf-8")):
            self.audit.audit(
                "REFRESH_TOKEN_MISMATCH",
                resource_type="User",
                resource_id=user.user_id,
                result="FAILURE",
            )
            raise TokenMismatch()

        access = create_access_token(user.user_id, user.role.value)
        self.audit.audit("REFRESH_TOKEN_USED", resource_type="User", resource_id=user.user_id, result="SUCCESS")
        return user, access

    def logout(self, db: Session, refresh_token: Optional[str]) -> None:
        if not refresh_token:
            return

        user = self.user_repo.find_by_refresh_token(db, refresh_token)
        if user is None:
            return

        user.refresh_token = None
        self.user_repo.save(db, user)
        self.audit.audit("USER_LOGOUT", resource_type="User", resource_id=user.user_id, result="SUCCESS")
