from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_identity, require_roles
from app.schemas.common import ok
from app.schemas.marks import MarksCreate, MarksUpdate
from app.services.marks import MarkService

router = APIRouter(prefix="/api/marks", tags=["marks"], dependencies=[Depends(get_current_identity)])
mark_service = MarkService()
authorize_staff = require_roles("staff")


@router.post("", status_code=status.HTTP_201_CREATED)
def record_marks(
    marks_in: MarksCreate,
    response: Response,
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    marks, created = mark_service.record_marks(db, marks_in)
    if not created:
        response.status_code = status.HTTP_200_OK
        return ok(marks, message="Marks updated successfully")
    return ok(marks, message="Marks registered successfully")


@router.get("")
def list_marks(db: Session = Depends(get_db)) -> dict:
    return ok(mark_service.list_marks(db))


@router.get("/student/{user_id}/session/{session}")
def marks_for_session(user_id: str, session: str, db: Session = Depends(get_db)) -> dict:
    return ok(mark_service.marks_for_session(db, user_id, session))


@router.get("/search/{unit_code}")
def marks_for_unit(unit_code: str, db: Session = Depends(get_db)) -> dict:
    return ok(mark_service.marks_for_unit(db, unit_code))


@router.get("/{user_id}")
def marks_for_student(user_id: str, db: Session = Depends(get_db)) -> dict:
    return ok(mark_service.marks_for_student(db, user_id))


@router.put("/{mark_id}")
def update_marks(
    mark_id: int,
    changes: MarksUpdate,
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    marks = mark_service.update_marks(db, mark_id, changes)
    return ok(marks, message="Marks updated successfully")


@router.delete("/{mark_id}")
def delete_marks(mark_id: int, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    mark_service.delete_marks(db, mark_id)
    return ok(message="Marks deleted successfully")
