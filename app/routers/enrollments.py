from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_identity, require_roles
from app.routers.deps import enrollment_filter
from app.schemas.common import ok
from app.schemas.enrollments import EnrollmentCreate, EnrollmentUpdate
from app.schemas.filters import EnrollmentFilter
from app.services.enrollments import EnrollmentService

router = APIRouter(prefix="/api/enrollments", tags=["enrollments"], dependencies=[Depends(get_current_identity)])
enrollment_service = EnrollmentService()
authorize_staff = require_roles("staff")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_enrollment(
    enrollment_in: EnrollmentCreate,
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    enrollment = enrollment_service.create_enrollment(db, enrollment_in)
    return ok(enrollment, message="Enrollment created successfully")


@router.get("")
def list_enrollments(db: Session = Depends(get_db)) -> dict:
    return ok(enrollment_service.list_enrollments(db))


@router.get("/search/{identifier}")
def search_enrollments(identifier: str, db: Session = Depends(get_db)) -> dict:
    return ok(enrollment_service.search_enrollments(db, identifier))


@router.get("/sessions/{student_id}")
def enrolled_sessions(student_id: str, db: Session = Depends(get_db)) -> dict:
    return ok(enrollment_service.enrolled_sessions(db, student_id))


@router.get("/filter")
def filter_enrollments(filters: EnrollmentFilter = Depends(enrollment_filter), db: Session = Depends(get_db)) -> dict:
    enrollments = enrollment_service.filter_enrollments(db, filters)
    return ok(enrollments, count=len(enrollments))


@router.get("/student/{student_id}")
def enrollments_by_student(student_id: str, db: Session = Depends(get_db)) -> dict:
    return ok(enrollment_service.list_by_student(db, student_id))


@router.get("/unit/{unit_code}")
def enrollments_by_unit(unit_code: str, db: Session = Depends(get_db)) -> dict:
    return ok(enrollment_service.list_by_unit(db, unit_code))


@router.put("/{enrollment_id}")
def update_enrollment(
    enrollment_id: int,
    changes: EnrollmentUpdate,
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    enrollment = enrollment_service.update_enrollment(db, enrollment_id, changes)
    return ok(enrollment, message="Enrollment updated successfully")


@router.delete("/{enrollment_id}")
def delete_enrollment(enrollment_id: int, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    enrollment_service.delete_enrollment(db, enrollment_id)
    return ok(message="Enrollment deleted successfully")
