from typing import List, Tuple

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import NotFoundError
from app.models.mark import Marks
from app.models.user import UserRole
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.mark_repository import MarkRepository
from app.repositories.unit_repository import UnitRepository
from app.repositories.user_repository import UserRepository
from app.schemas.marks import MarksCreate, MarksOut, MarksUpdate
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary


class MarkService:
    def __init__(
        self,
        mark_repo: MarkRepository | None = None,
        enrollment_repo: EnrollmentRepository | None = None,
        user_repo: UserRepository | None = None,
        unit_repo: UnitRepository | None = None,
        audit: AuditLogger | None = None,
    ):
        self.mark_repo = mark_repo or MarkRepository()
        self.enrollment_repo = enrollment_repo or EnrollmentRepository()
        self.user_repo = user_repo or UserRepository()
        self.unit_repo = unit_repo or UnitRepository()
        self.audit = audit or AuditLogger()

    def _present(self, db: Session, rows: List[Marks]) -> List[MarksOut]:
        students = self.user_repo.get_many(db, {row.student_id for row in rows})
        units = self.unit_repo.get_many(db, {row.unit_code for row in rows})
        result = []
        for row in rows:
            out = MarksOut.model_validate(row)
            if row.student_id in students:
                out.student = PersonSummary.model_validate(students[row.student_id])
            if row.unit_code in units:
                out.unit = UnitSummary.model_validate(units[row.unit_code])
            result.append(out)
        return result

    def _require_student(self, db: Session, student_id: str) -> None:
        if self.user_repo.find_by_role(db, student_id, UserRole.STUDENT) is None:
            raise NotFoundError("Student not found")

    def _get_marks(self, db: Session, mark_id: int) -> Marks:
        marks = self.mark_repo.get(db, mark_id)
        if marks is None:
            raise NotFoundError("Marks not found")
        return marks

    def record_marks(self, db: Session, marks_in: MarksCreate) -> Tuple[MarksOut, bool]:
        """Create the marks row for a student/unit pair, or merge the sent scores into it.

        Returns the row and whether it was newly created.
        """
        self._require_student(db, marks_in.student_id)
        if self.unit_repo.get(db, marks_in.unit_code) is None:
            raise NotFoundError("Unit not found")
        if self.enrollment_repo.find(db, marks_in.student_id, marks_in.unit_code) is None:
            raise NotFoundError("Student must enroll for the unit first")

        scores = marks_in.provided()
        marks = self.mark_repo.find(db, marks_in.student_id, marks_in.unit_code)
        if marks is not None:
            for field, value in scores.items():
                setattr(marks, field, value)
            marks = self.mark_repo.save(db, marks)
            action, created = "UPDATE_MARKS", False
        else:
            marks = self.mark_repo.create(db, marks_in.student_id, marks_in.unit_code, scores)
            action, created = "CREATE_MARKS", True

        self.audit.audit(
            action,
            resource_type="Marks",
            resource_id=marks.id,
            student_id=marks.student_id,
            unit_code=marks.unit_code,
            result="SUCCESS",
        )
        return self._present(db, [marks])[0], created

    def list_marks(self, db: Session) -> List[MarksOut]:
        marks = self._present(db, self.mark_repo.list_all(db))
        self.audit.event("GET_ALL_MARKS", count=len(marks))
        return marks

    def marks_for_student(self, db: Session, student_id: str) -> List[MarksOut]:
        self._require_student(db, student_id)
        marks = self._present(db, self.mark_repo.list_by_student(db, student_id))
        self.audit.event("GET_MARKS_BY_STUDENT", student_id=student_id, count=len(marks))
        return marks

    def marks_for_session(self, db: Session, student_id: str, session: str) -> List[MarksOut]:
        self._require_student(db, student_id)
        unit_codes = self.enrollment_repo.unit_codes_for_session(db, student_id, session)
        if not unit_codes:
            return []
        marks = self._present(db, self.mark_repo.list_by_student(db, student_id, unit_codes))
        self.audit.event("GET_MARKS_BY_SESSION", student_id=student_id, session=session, count=len(marks))
        return marks

    def marks_for_unit(self, db: Session, unit_code: str) -> List[MarksOut]:
        if self.unit_repo.get(db, unit_code) is None:
            raise NotFoundError("Unit not found")
        marks = self._present(db, self.mark_repo.list_by_unit(db, unit_code))
        self.audit.event("GET_MARKS_BY_UNIT", unit_code=unit_code, count=len(marks))
        return marks

    def update_marks(self, db: Session, mark_id: int, changes: MarksUpdate) -> MarksOut:
        marks = self._get_marks(db, mark_id)
        for field, value in changes.provided().items():
            setattr(marks, field, value)
        marks = self.mark_repo.save(db, marks)
        self.audit.audit(
            "UPDATE_MARKS",
            resource_type="Marks",
            resource_id=marks.id,
            student_id=marks.student_id,
            unit_code=marks.unit_code,
            result="SUCCESS",
        )
        return self._present(db, [marks])[0]

    def delete_marks(self, db: Session, mark_id: int) -> None:
        marks = self._get_marks(db, mark_id)
        self.mark_repo.delete(db, marks)
        self.audit.audit("DELETE_MARKS", resource_type="Marks", resource_id=mark_id, result="SUCCESS")
