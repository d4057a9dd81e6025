from typing import Optional

from sqlalchemy.orm import Session

from app.models.evidence import Evidence, EvidenceType


class EvidenceRepository:
    def get(self, db: Session, evidence_id: int) -> Optional[Evidence]:
        return db.get(Evidence, evidence_id)

    def create(self, db: Session, **fields) -> Evidence:
        evidence = Evidence(**fields)
        return self.save(db, evidence)

    def save(self, db: Session, evidence: Evidence) -> Evidence:
        db.add(evidence)
        db.commit()
        db.refresh(evidence)
        return evidence

    def delete(self, db: Session, evidence: Evidence) -> None:
        db.delete(evidence)
        db.commit()

    def list_all(self, db: Session) -> list[Evidence]:
        return db.query(Evidence).order_by(Evidence.uploaded_at.desc()).all()

    def list_by_student(self, db: Session, student_id: str) -> list[Evidence]:
        return (
            db.query(Evidence)
            .filter(Evidence.student_id == student_id)
            .order_by(Evidence.unit_code.asc(), Evidence.evidence_type.asc(), Evidence.uploaded_at.desc())
            .all()
        )

    def list_videos(self, db: Session, student_id: str, unit_code: str) -> list[Evidence]:
        return (
            db.query(Evidence)
            .filter(
                Evidence.student_id == student_id,
                Evidence.unit_code == unit_code,
                Evidence.evidence_type == EvidenceType.VIDEO.value,
            )
            .order_by(Evidence.uploaded_at.desc())
            .all()
        )

    def list_by_unit(self, db: Session, unit_code: str) -> list[Evidence]:
        return (
            db.query(Evidence)
            .filter(Evidence.unit_code == unit_code)
            .order_by(Evidence.uploaded_at.desc())
            .all()
        )
