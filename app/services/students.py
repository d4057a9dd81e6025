from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.user import User, UserRole
from app.repositories.user_repository import UserRepository
from app.schemas.filters import StudentFilter
from app.schemas.students import StudentOut, StudentUpdate
from app.services.uploads import IncomingFile, UploadService


class StudentService:
    def __init__(
        self,
        user_repo: UserRepository | None = None,
        uploads: UploadService | None = None,
        audit: AuditLogger | None = None,
    ):
        self.user_repo = user_repo or UserRepository()
        self.uploads = uploads or UploadService()
        self.audit = audit or AuditLogger()

    def _get_student(self, db: Session, student_id: str) -> User:
        student = self.user_repo.find_by_role(db, student_id, UserRole.STUDENT)
        if student is None:
            raise NotFoundError("Student not found")
        return student

    def list_students(self, db: Session) -> List[StudentOut]:
        students = [StudentOut.model_validate(user) for user in self.user_repo.list_students(db)]
        self.audit.event("FETCH_ALL_STUDENTS", count=len(students))
        return students

    def filter_students(self, db: Session, filters: StudentFilter) -> List[StudentOut]:
        students = [StudentOut.model_validate(user) for user in self.user_repo.filter_students(db, filters)]
        self.audit.audit(
            "FILTER_STUDENTS",
            filters=filters.model_dump(exclude_none=True, mode="json"),
            count=len(students),
        )
        return students

    def get_student(self, db: Session, student_id: str) -> StudentOut:
        student = self.user_repo.find_by_role(db, student_id, UserRole.STUDENT)
        if student is None:
            self.audit.audit("STUDENT_NOT_FOUND", student_id=student_id)
            raise NotFoundError("Student not found")
        return StudentOut.model_validate(student)

    def search_students(self, db: Session, identifier: str) -> List[StudentOut]:
        if not identifier.strip():
            raise ValidationError("Search identifier is required")
        students = [StudentOut.model_validate(user) for user in self.user_repo.search_students(db, identifier)]
        self.audit.audit("SEARCH_STUDENTS", identifier=identifier, count=len(students))
        return students

    def update_student(
        self,
        db: Session,
        student_id: str,
        changes: StudentUpdate,
        profile_pic: Optional[IncomingFile] = None,
    ) -> StudentOut:
        student = self._get_student(db, student_id)

        if changes.user_id and changes.user_id != student.user_id:
            if self.user_repo.find_by_user_id(db, changes.user_id):
                raise ConflictError("UserId already exists")
        if changes.email and str(changes.email) != student.email:
            if self.user_repo.find_by_email(db, str(changes.email)):
                raise ConflictError("Email already exists")

        stored_pic = None
        if profile_pic is not None and profile_pic.data:
            stored_pic = self.uploads.store_profile_picture(profile_pic)
            student.profile_pic = stored_pic

        for field, value in changes.model_dump(exclude_none=True).items():
            setattr(student, field, str(value) if field == "email" else value)

        try:
            student = self.user_repo.save(db, student)
        except Exception:
            if stored_pic:
                self.uploads.discard(stored_pic)
            raise
        self.audit.audit("UPDATE_STUDENT", student_id=student_id)
        return StudentOut.model_validate(student)

    def delete_student(self, db: Session, student_id: str) -> None:
        student = self._get_student(db, student_id)
        self.user_repo.delete(db, student)
        self.audit.audit("DELETE_STUDENT", student_id=student_id)
