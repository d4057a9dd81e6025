import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.database import engine
from app.core.errors import register_exception_handlers
from app.core.logging_config import setup_logging
from app.core.middleware import RequestIDMiddleware
import app.models  # noqa: F401
from app.models.base import Base
from app.routers import auth as auth_router
from app.routers import enrollments as enrollments_router
from app.routers import evidence as evidence_router
from app.routers import marks as marks_router
from app.routers import students as students_router
from app.routers import units as units_router

logger = logging.getLogger("app")


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Application started", extra={"environment": settings.environment})
    yield
    logger.info("Application stopped")


def create_app() -> FastAPI:
    setup_logging(log_level=settings.log_level, log_dir=settings.log_dir)

    application = FastAPI(title="Unit Records API", lifespan=lifespan)
    application.add_middleware(RequestIDMiddleware)
    register_exception_handlers(application)

    application.include_router(auth_router.router)
    application.include_router(students_router.router)
    application.include_router(units_router.router)
    application.include_router(enrollments_router.router)
    application.include_router(marks_router.router)
    application.include_router(evidence_router.router)

    public_root = Path(settings.storage_root) / settings.public_dir
    application.mount("/public", StaticFiles(directory=public_root, check_dir=False), name="public")

    @application.get("/health", tags=["health"])
    def health() -> dict:
        return {"status": "ok"}

    return application


app = create_app()
