from typing import Optional

from fastapi import APIRouter, Depends, Form
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_identity, require_roles
from app.routers.deps import parse_model, profile_pic_file, student_filter
from app.schemas.common import ok
from app.schemas.filters import StudentFilter
from app.schemas.students import StudentUpdate
from app.services.students import StudentService
from app.services.uploads import IncomingFile

router = APIRouter(prefix="/api/students", tags=["students"], dependencies=[Depends(get_current_identity)])
student_service = StudentService()
authorize_staff = require_roles("staff")


@router.get("")
def list_students(db: Session = Depends(get_db)) -> dict:
    return ok(student_service.list_students(db))


@router.get("/filter")
def filter_students(filters: StudentFilter = Depends(student_filter), db: Session = Depends(get_db)) -> dict:
    students = student_service.filter_students(db, filters)
    return ok(students, count=len(students))


@router.get("/search/{identifier}")
def search_students(identifier: str, db: Session = Depends(get_db)) -> dict:
    return ok(student_service.search_students(db, identifier))


@router.get("/{student_id}")
def get_student(student_id: str, db: Session = Depends(get_db)) -> dict:
    return ok(student_service.get_student(db, student_id))


@router.put("/edit/{student_id}")
def update_student(
    student_id: str,
    user_id: Optional[str] = Form(None, alias="userId"),
    email: Optional[str] = Form(None),
    firstname: Optional[str] = Form(None),
    lastname: Optional[str] = Form(None),
    gender: Optional[str] = Form(None),
    department: Optional[str] = Form(None),
    level: Optional[str] = Form(None),
    profile_pic: Optional[IncomingFile] = Depends(profile_pic_file),
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    changes = parse_model(
        StudentUpdate,
        {
            "userId": user_id,
            "email": email,
            "firstname": firstname,
            "lastname": lastname,
            "gender": gender,
            "department": department,
            "level": level,
        },
    )
    student = student_service.update_student(db, student_id, changes, profile_pic)
    return ok(student, message="Student updated successfully")


@router.delete("/{student_id}")
def delete_student(student_id: str, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    student_service.delete_student(db, student_id)
    return ok(message="Student deleted successfully")
