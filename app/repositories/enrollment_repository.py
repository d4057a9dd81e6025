from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.enrollment import Enrollment
from app.schemas.filters import EnrollmentFilter


class EnrollmentRepository:
    def get(self, db: Session, enrollment_id: int) -> Optional[Enrollment]:
        return db.get(Enrollment, enrollment_id)

    def find(self, db: Session, student_id: str, unit_code: str, session: Optional[str] = None) -> Optional[Enrollment]:
        query = db.query(Enrollment).filter(
            Enrollment.student_id == student_id,
            Enrollment.unit_code == unit_code,
        )
        if session is not None:
            query = query.filter(Enrollment.session == session)
        return query.first()

    def create(self, db: Session, student_id: str, unit_code: str, session: str) -> Enrollment:
        enrollment = Enrollment(student_id=student_id, unit_code=unit_code, session=session)
        return self.save(db, enrollment)

    def save(self, db: Session, enrollment: Enrollment) -> Enrollment:
        db.add(enrollment)
        db.commit()
        db.refresh(enrollment)
        return enrollment

    def delete(self, db: Session, enrollment: Enrollment) -> None:
        db.delete(enrollment)
        db.commit()

    def list_all(self, db: Session) -> list[Enrollment]:
        return db.query(Enrollment).order_by(Enrollment.id.asc()).all()

    def list_by_student(self, db: Session, student_id: str) -> list[Enrollment]:
        return db.query(Enrollment).filter(Enrollment.student_id == student_id).all()

    def list_by_unit(self, db: Session, unit_code: str) -> list[Enrollment]:
        return db.query(Enrollment).filter(Enrollment.unit_code == unit_code).all()

    def unit_codes_for_session(self, db: Session, student_id: str, session: str) -> list[str]:
        rows = (
            db.query(Enrollment.unit_code)
            .filter(Enrollment.student_id == student_id, Enrollment.session == session)
            .all()
        )
        return [row.unit_code for row in rows]

    def sessions_for_student(self, db: Session, student_id: str) -> list[str]:
        rows = (
            db.query(Enrollment.session)
            .filter(Enrollment.student_id == student_id)
            .distinct()
            .order_by(Enrollment.session.asc())
            .all()
        )
        return [row.session for row in rows]

    def search(self, db: Session, identifier: str, limit: int = 50) -> list[Enrollment]:
        pattern = f"%{identifier}%"
        return (
            db.query(Enrollment)
            .filter(
                or_(
                    Enrollment.session.like(pattern),
                    Enrollment.unit_code.like(pattern),
                    Enrollment.student_id.like(pattern),
                )
            )
            .limit(limit)
            .all()
        )

    def filter(self, db: Session, filters: EnrollmentFilter, limit: int = 50) -> list[Enrollment]:
        query = db.query(Enrollment)
        if filters.student_id:
            query = query.filter(Enrollment.student_id.like(f"%{filters.student_id}%"))
        if filters.unit_code:
            query = query.filter(Enrollment.unit_code.like(f"%{filters.unit_code}%"))
        if filters.session:
            query = query.filter(Enrollment.session.like(f"%{filters.session}%"))
        return query.limit(limit).all()
