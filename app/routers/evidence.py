from typing import Optional

from fastapi import APIRouter, Depends, Form, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import CurrentIdentity, get_current_identity, require_roles
from app.routers.deps import evidence_file
from app.schemas.common import ok
from app.services.evidence import EvidenceService
from app.services.uploads import IncomingFile

router = APIRouter(prefix="/api/evidences", tags=["evidence"], dependencies=[Depends(get_current_identity)])
evidence_service = EvidenceService()
authorize_student = require_roles("student")
authorize_staff = require_roles("staff")


@router.post("", status_code=status.HTTP_201_CREATED)
def upload_evidence(
    unit_code: str = Form(..., alias="unitCode"),
    description: Optional[str] = Form(None),
    file: Optional[IncomingFile] = Depends(evidence_file),
    db: Session = Depends(get_db),
    identity: CurrentIdentity = Depends(authorize_student),
) -> dict:
    evidence = evidence_service.upload_evidence(db, identity.user_id, unit_code, file, description)
    return ok(evidence, message="Evidence uploaded successfully")


@router.get("")
def list_evidence(db: Session = Depends(get_db)) -> dict:
    return ok(evidence_service.list_evidence(db))


@router.get("/student/{student_id}")
def evidence_by_student(student_id: str, db: Session = Depends(get_db)) -> dict:
    return ok(evidence_service.evidence_by_student(db, student_id))


@router.get("/student/{student_id}/unit/{unit_code}/videos")
def videos_for_unit(student_id: str, unit_code: str, db: Session = Depends(get_db)) -> dict:
    return ok(evidence_service.videos_for_unit(db, student_id, unit_code))


@router.get("/unit/{unit_code}")
def evidence_by_unit(unit_code: str, db: Session = Depends(get_db)) -> dict:
    return ok(evidence_service.evidence_by_unit(db, unit_code))


@router.put("/{evidence_id}")
def update_evidence(
    evidence_id: int,
    student_id: Optional[str] = Form(None, alias="studentId"),
    unit_code: Optional[str] = Form(None, alias="unitCode"),
    description: Optional[str] = Form(None),
    file: Optional[IncomingFile] = Depends(evidence_file),
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    evidence = evidence_service.update_evidence(
        db,
        evidence_id,
        student_id=student_id,
        unit_code=unit_code,
        description=description,
        file=file,
    )
    return ok(evidence, message="Evidence updated successfully")


@router.delete("/{evidence_id}")
def delete_evidence(evidence_id: int, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    evidence_service.delete_evidence(db, evidence_id)
    return ok(message="Evidence deleted successfully")
