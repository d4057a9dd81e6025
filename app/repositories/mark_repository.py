from typing import Optional

from sqlalchemy.orm import Session

from app.models.mark import Marks


class MarkRepository:
    def get(self, db: Session, mark_id: int) -> Optional[Marks]:
        return db.get(Marks, mark_id)

    def find(self, db: Session, student_id: str, unit_code: str) -> Optional[Marks]:
        return (
            db.query(Marks)
            .filter(Marks.student_id == student_id, Marks.unit_code == unit_code)
            .first()
        )

    def create(self, db: Session, student_id: str, unit_code: str, scores: dict) -> Marks:
        marks = Marks(student_id=student_id, unit_code=unit_code, **scores)
        return self.save(db, marks)

    def save(self, db: Session, marks: Marks) -> Marks:
        db.add(marks)
        db.commit()
        db.refresh(marks)
        return marks

    def delete(self, db: Session, marks: Marks) -> None:
        db.delete(marks)
        db.commit()

    def list_all(self, db: Session) -> list[Marks]:
        return db.query(Marks).order_by(Marks.id.asc()).all()

    def list_by_student(self, db: Session, student_id: str, unit_codes: Optional[list[str]] = None) -> list[Marks]:
        query = db.query(Marks).filter(Marks.student_id == student_id)
        if unit_codes is not None:
            query = query.filter(Marks.unit_code.in_(unit_codes))
        return query.order_by(Marks.unit_code.asc()).all()

    def list_by_unit(self, db: Session, unit_code: str) -> list[Marks]:
        return db.query(Marks).filter(Marks.unit_code == unit_code).all()
