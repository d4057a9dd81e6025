from typing import List, Optional

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import NotFoundError
from app.models.evidence import Evidence, EvidenceType
from app.models.user import UserRole
from app.repositories.evidence_repository import EvidenceRepository
from app.repositories.unit_repository import UnitRepository
from app.repositories.user_repository import UserRepository
from app.schemas.evidence import EvidenceGroup, EvidenceOut
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary
from app.services.uploads import IncomingFile, UploadService


class EvidenceService:
    def __init__(
        self,
        evidence_repo: EvidenceRepository | None = None,
        user_repo: UserRepository | None = None,
        unit_repo: UnitRepository | None = None,
        uploads: UploadService | None = None,
        audit: AuditLogger | None = None,
    ):
        self.evidence_repo = evidence_repo or EvidenceRepository()
        self.user_repo = user_repo or UserRepository()
        self.unit_repo = unit_repo or UnitRepository()
        self.uploads = uploads or UploadService()
        self.audit = audit or AuditLogger()

    def _present(self, db: Session, rows: List[Evidence]) -> List[EvidenceOut]:
        students = self.user_repo.get_many(db, {row.student_id for row in rows})
        units = self.unit_repo.get_many(db, {row.unit_code for row in rows})
        result = []
        for row in rows:
            out = EvidenceOut.model_validate(row)
            if row.student_id in students:
                out.student = PersonSummary.model_validate(students[row.student_id])
            if row.unit_code in units:
                out.unit = UnitSummary.model_validate(units[row.unit_code])
            result.append(out)
        return result

    def _require_student(self, db: Session, student_id: str) -> None:
        if self.user_repo.find_by_role(db, student_id, UserRole.STUDENT) is None:
            raise NotFoundError("Student not found")

    def _require_unit(self, db: Session, unit_code: str) -> None:
        if self.unit_repo.get(db, unit_code) is None:
            raise NotFoundError("Unit not found")

    def upload_evidence(
        self,
        db: Session,
        student_id: str,
        unit_code: str,
        file: Optional[IncomingFile],
        description: Optional[str] = None,
    ) -> EvidenceOut:
        self._require_student(db, student_id)
        self._require_unit(db, unit_code)

        asset, evidence_type = self.uploads.store_evidence(file)
        try:
            evidence = self.evidence_repo.create(
                db,
                student_id=student_id,
                unit_code=unit_code,
                filename=asset.storage_path,
                original_name=asset.original_name,
                evidence_type=evidence_type.value,
                description=description or None,
            )
        except Exception:
            self.uploads.discard(asset.storage_path)
            raise
        self.audit.audit(
            "CREATE_EVIDENCE",
            resource_type="Evidence",
            resource_id=evidence.id,
            student_id=student_id,
            unit_code=unit_code,
            evidence_type=evidence_type.value,
            result="SUCCESS",
        )
        return self._present(db, [evidence])[0]

    def list_evidence(self, db: Session) -> List[EvidenceOut]:
        evidence = self._present(db, self.evidence_repo.list_all(db))
        self.audit.event("GET_ALL_EVIDENCE", count=len(evidence))
        return evidence

    def evidence_by_student(self, db: Session, student_id: str) -> List[EvidenceGroup]:
        """Group a student's evidence per unit, keeping unit-code order."""
        rows = self._present(db, self.evidence_repo.list_by_student(db, student_id))
        groups: dict[str, EvidenceGroup] = {}
        for item in rows:
            group = groups.get(item.unit_code)
            if group is None:
                group = EvidenceGroup(
                    unit_code=item.unit_code,
                    unit_name=item.unit.unit_name if item.unit else None,
                    images=[],
                    videos=[],
                )
                groups[item.unit_code] = group
            if item.evidence_type is EvidenceType.IMAGE:
                group.images.append(item)
            elif item.evidence_type is EvidenceType.VIDEO:
                group.videos.append(item)
        self.audit.event("GET_EVIDENCE_BY_STUDENT", student_id=student_id, count=len(rows))
        return list(groups.values())

    def videos_for_unit(self, db: Session, student_id: str, unit_code: str) -> List[EvidenceOut]:
        videos = self._present(db, self.evidence_repo.list_videos(db, student_id, unit_code))
        self.audit.event("GET_VIDEOS_BY_STUDENT_UNIT", student_id=student_id, unit_code=unit_code, count=len(videos))
        return videos

    def evidence_by_unit(self, db: Session, unit_code: str) -> List[EvidenceOut]:
        evidence = self._present(db, self.evidence_repo.list_by_unit(db, unit_code))
        self.audit.event("GET_EVIDENCE_BY_UNIT", unit_code=unit_code, count=len(evidence))
        return evidence

    def update_evidence(
        self,
        db: Session,
        evidence_id: int,
        student_id: Optional[str] = None,
        unit_code: Optional[str] = None,
        description: Optional[str] = None,
        file: Optional[IncomingFile] = None,
    ) -> EvidenceOut:
        evidence = self.evidence_repo.get(db, evidence_id)
        if evidence is None:
            raise NotFoundError("Evidence not found")

        if student_id:
            self._require_student(db, student_id)
            evidence.student_id = student_id
        if unit_code:
            self._require_unit(db, unit_code)
            evidence.unit_code = unit_code
        if description is not None:
            evidence.description = description
        asset = None
        if file is not None and file.data:
            asset, evidence_type = self.uploads.store_evidence(file)
            evidence.filename = asset.storage_path
            evidence.original_name = asset.original_name
            evidence.evidence_type = evidence_type.value

        try:
            evidence = self.evidence_repo.save(db, evidence)
        except Exception:
            if asset is not None:
                self.uploads.discard(asset.storage_path)
            raise
        self.audit.audit(
            "UPDATE_EVIDENCE",
            resource_type="Evidence",
            resource_id=evidence.id,
            student_id=evidence.student_id,
            unit_code=evidence.unit_code,
            evidence_type=evidence.evidence_type,
            result="SUCCESS",
        )
        return self._present(db, [evidence])[0]

    def delete_evidence(self, db: Session, evidence_id: int) -> None:
        evidence = self.evidence_repo.get(db, evidence_id)
        if evidence is None:
            raise NotFoundError("Evidence not found")
        self.evidence_repo.delete(db, evidence)
        self.audit.audit("DELETE_EVIDENCE", resource_type="Evidence", resource_id=evidence_id, result="SUCCESS")
