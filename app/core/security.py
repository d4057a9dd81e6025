import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.audit import bind_actor
from app.core.config import settings
from app.core.errors import AuthError, AuthorizationError, ExpiredToken, MalformedToken

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password with bcrypt (passlib)."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    return pwd_context.verify(password, hashed_password)


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    role: str
    token_type: str
    jti: str
    expires_at: datetime


def _create_token(user_id: str, role: str, token_type: str, secret: str, expires_delta: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload: Dict[str, Any] = {
        "sub": user_id,
        "role": role,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(payload, secret, algorithm=settings.jwt_algorithm)


def create_access_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        role,
        ACCESS_TOKEN_TYPE,
        settings.access_token_secret,
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes),
    )


def create_refresh_token(user_id: str, role: str, expires_delta: Optional[timedelta] = None) -> str:
    return _create_token(
        user_id,
        role,
        REFRESH_TOKEN_TYPE,
        settings.refresh_token_secret,
        expires_delta or timedelta(minutes=settings.refresh_token_expire_minutes),
    )


def decode_token(token: str, secret: str, expected_type: str) -> TokenClaims:
    """Verify signature, expiry and shape of ``token``.

    Raises ``ExpiredToken`` once past expiry and ``MalformedToken`` for any
    other defect (bad signature, garbage input, wrong token type, missing
    claims).
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise ExpiredToken() from exc
    except JWTError as exc:
        raise MalformedToken() from exc

    user_id = payload.get("sub")
    role = payload.get("role")
    if payload.get("type") != expected_type or not user_id or not role:
        raise MalformedToken()

    return TokenClaims(
        user_id=user_id,
        role=role,
        token_type=expected_type,
        jti=payload.get("jti", ""),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )


def decode_access_token(token: str) -> TokenClaims:
    return decode_token(token, settings.access_token_secret, ACCESS_TOKEN_TYPE)


def decode_refresh_token(token: str) -> TokenClaims:
    return decode_token(token, settings.refresh_token_secret, REFRESH_TOKEN_TYPE)


@dataclass(frozen=True)
class CurrentIdentity:
    user_id: str
    role: str


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentIdentity:
    if credentials is None or not credentials.credentials:
        raise AuthError("Wrongly formatted header")

    claims = decode_access_token(credentials.credentials)
    identity = CurrentIdentity(user_id=claims.user_id, role=claims.role)
    request.state.identity = identity
    bind_actor(identity.user_id, identity.role)
    return identity


def require_roles(*roles: str) -> Callable:
    allowed = set(roles)

    def dependency(identity: CurrentIdentity = Depends(get_current_identity)) -> CurrentIdentity:
        if identity.role not in allowed:
            raise AuthorizationError()
        return identity

    return dependency
