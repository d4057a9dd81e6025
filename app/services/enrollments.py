from typing import List

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.enrollment import Enrollment
from app.models.user import UserRole
from app.repositories.enrollment_repository import EnrollmentRepository
from app.repositories.unit_repository import UnitRepository
from app.repositories.user_repository import UserRepository
from app.schemas.enrollments import EnrollmentCreate, EnrollmentOut, EnrollmentUpdate
from app.schemas.filters import EnrollmentFilter
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary


class EnrollmentService:
    def __init__(
        self,
        enrollment_repo: EnrollmentRepository | None = None,
        user_repo: UserRepository | None = None,
        unit_repo: UnitRepository | None = None,
        audit: AuditLogger | None = None,
    ):
        self.enrollment_repo = enrollment_repo or EnrollmentRepository()
        self.user_repo = user_repo or UserRepository()
        self.unit_repo = unit_repo or UnitRepository()
        self.audit = audit or AuditLogger()

    def _present(self, db: Session, enrollments: List[Enrollment]) -> List[EnrollmentOut]:
        students = self.user_repo.get_many(db, {item.student_id for item in enrollments})
        units = self.unit_repo.get_many(db, {item.unit_code for item in enrollments})
        result = []
        for item in enrollments:
            out = EnrollmentOut.model_validate(item)
            if item.student_id in students:
                out.student = PersonSummary.model_validate(students[item.student_id])
            if item.unit_code in units:
                out.unit = UnitSummary.model_validate(units[item.unit_code])
            result.append(out)
        return result

    def _require_student(self, db: Session, student_id: str) -> None:
        if self.user_repo.find_by_role(db, student_id, UserRole.STUDENT) is None:
            raise NotFoundError("Student not found")

    def _require_unit(self, db: Session, unit_code: str) -> None:
        if self.unit_repo.get(db, unit_code) is None:
            raise NotFoundError("Unit not found")

    def _get_enrollment(self, db: Session, enrollment_id: int) -> Enrollment:
        enrollment = self.enrollment_repo.get(db, enrollment_id)
        if enrollment is None:
            raise NotFoundError("Enrollment not found")
        return enrollment

    def create_enrollment(self, db: Session, enrollment_in: EnrollmentCreate) -> EnrollmentOut:
        self._require_student(db, enrollment_in.student_id)
        self._require_unit(db, enrollment_in.unit_code)
        if self.enrollment_repo.find(db, enrollment_in.student_id, enrollment_in.unit_code, enrollment_in.session):
            raise ConflictError("Student already enrolled for this session")

        enrollment = self.enrollment_repo.create(
            db,
            student_id=enrollment_in.student_id,
            unit_code=enrollment_in.unit_code,
            session=enrollment_in.session,
        )
        self.audit.audit(
            "CREATE_ENROLLMENT",
            resource_type="Enrollment",
            resource_id=enrollment.id,
            student_id=enrollment.student_id,
            unit_code=enrollment.unit_code,
            session=enrollment.session,
            result="SUCCESS",
        )
        return self._present(db, [enrollment])[0]

    def list_enrollments(self, db: Session) -> List[EnrollmentOut]:
        enrollments = self._present(db, self.enrollment_repo.list_all(db))
        self.audit.event("GET_ALL_ENROLLMENTS", count=len(enrollments))
        return enrollments

    def list_by_student(self, db: Session, student_id: str) -> List[EnrollmentOut]:
        self._require_student(db, student_id)
        enrollments = self._present(db, self.enrollment_repo.list_by_student(db, student_id))
        self.audit.event("GET_ENROLLMENTS_BY_STUDENT", student_id=student_id, count=len(enrollments))
        return enrollments

    def list_by_unit(self, db: Session, unit_code: str) -> List[EnrollmentOut]:
        enrollments = self._present(db, self.enrollment_repo.list_by_unit(db, unit_code))
        self.audit.event("GET_ENROLLMENTS_BY_UNIT", unit_code=unit_code, count=len(enrollments))
        return enrollments

    def search_enrollments(self, db: Session, identifier: str) -> List[EnrollmentOut]:
        if not identifier.strip():
            raise ValidationError("Search parameter is required")
        enrollments = self._present(db, self.enrollment_repo.search(db, identifier))
        self.audit.event("SEARCH_ENROLLMENTS", identifier=identifier, count=len(enrollments))
        return enrollments

    def filter_enrollments(self, db: Session, filters: EnrollmentFilter) -> List[EnrollmentOut]:
        enrollments = self._present(db, self.enrollment_repo.filter(db, filters))
        self.audit.event("FILTER_ENROLLMENTS", filters=filters.model_dump(exclude_none=True), count=len(enrollments))
        return enrollments

    def enrolled_sessions(self, db: Session, student_id: str) -> List[str]:
        sessions = self.enrollment_repo.sessions_for_student(db, student_id)
        self.audit.event("GET_ENROLLED_SESSIONS", student_id=student_id, count=len(sessions))
        return sessions

    def update_enrollment(self, db: Session, enrollment_id: int, changes: EnrollmentUpdate) -> EnrollmentOut:
        enrollment = self._get_enrollment(db, enrollment_id)

        if changes.student_id:
            self._require_student(db, changes.student_id)
        if changes.unit_code:
            self._require_unit(db, changes.unit_code)

        student_id = changes.student_id or enrollment.student_id
        unit_code = changes.unit_code or enrollment.unit_code
        session = changes.session or enrollment.session
        duplicate = self.enrollment_repo.find(db, student_id, unit_code, session)
        if duplicate is not None and duplicate.id != enrollment.id:
            raise ConflictError("Student already enrolled for this session")

        enrollment.student_id = student_id
        enrollment.unit_code = unit_code
        enrollment.session = session
        enrollment = self.enrollment_repo.save(db, enrollment)
        self.audit.audit(
            "UPDATE_ENROLLMENT",
            resource_type="Enrollment",
            resource_id=enrollment.id,
            student_id=enrollment.student_id,
            unit_code=enrollment.unit_code,
            session=enrollment.session,
            result="SUCCESS",
        )
        return self._present(db, [enrollment])[0]

    def delete_enrollment(self, db: Session, enrollment_id: int) -> None:
        enrollment = self._get_enrollment(db, enrollment_id)
        self.enrollment_repo.delete(db, enrollment)
        self.audit.audit("DELETE_ENROLLMENT", resource_type="Enrollment", resource_id=enrollment_id, result="SUCCESS")
