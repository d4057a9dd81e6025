from datetime import datetime
from typing import Optional

from app.models.evidence import EvidenceType
from app.schemas.common import CamelModel
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary


class EvidenceOut(CamelModel):
    id: int
    student_id: str
    unit_code: str
    filename: str
    original_name: str
    evidence_type: EvidenceType
    description: Optional[str] = None
    uploaded_at: datetime
    student: Optional[PersonSummary] = None
    unit: Optional[UnitSummary] = None


class EvidenceGroup(CamelModel):
    """A student's evidence for one unit, split by media kind."""

    unit_code: str
    unit_name: Optional[str] = None
    images: list[EvidenceOut] = []
    videos: list[EvidenceOut] = []
