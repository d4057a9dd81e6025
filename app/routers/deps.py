from typing import Optional, Type, TypeVar

import pydantic
from fastapi import Cookie, File, Request, UploadFile

from app.core.config import settings
from app.core.errors import ValidationError
from app.schemas.filters import EnrollmentFilter, StudentFilter, UnitFilter
from app.services.uploads import IncomingFile

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def parse_model(model: Type[ModelT], data: dict) -> ModelT:
    """Validate raw form/query data, reporting failures as a 400 field map."""
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        fields = {
            ".".join(str(part) for part in err["loc"]) or "request": err["msg"]
            for err in exc.errors()
        }
        message = "; ".join(f"{name}: {msg}" for name, msg in fields.items())
        raise ValidationError(message, details=fields) from exc


async def to_incoming_file(upload: Optional[UploadFile]) -> Optional[IncomingFile]:
    if upload is None:
        return None
    data = await upload.read()
    return IncomingFile(
        filename=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
    )


async def profile_pic_file(profile_pic: Optional[UploadFile] = File(None, alias="profilePic")) -> Optional[IncomingFile]:
    return await to_incoming_file(profile_pic)


async def evidence_file(file: Optional[UploadFile] = File(None)) -> Optional[IncomingFile]:
    return await to_incoming_file(file)


def student_filter(request: Request) -> StudentFilter:
    return parse_model(StudentFilter, dict(request.query_params))


def unit_filter(request: Request) -> UnitFilter:
    return parse_model(UnitFilter, dict(request.query_params))


def enrollment_filter(request: Request) -> EnrollmentFilter:
    return parse_model(EnrollmentFilter, dict(request.query_params))


def refresh_cookie(token: Optional[str] = Cookie(None, alias=settings.refresh_cookie_name)) -> Optional[str]:
    return token
