from datetime import datetime
from typing import Optional

from pydantic import Field

from app.models.mark import SCORE_FIELDS
from app.schemas.common import CamelModel
from app.schemas.students import PersonSummary
from app.schemas.units import UnitSummary


class Scores(CamelModel):
    theory1: Optional[int] = None
    theory2: Optional[int] = None
    theory3: Optional[int] = None
    prac1: Optional[int] = None
    prac2: Optional[int] = None
    prac3: Optional[int] = None

    def provided(self) -> dict:
        """Score fields that were actually sent, for partial merges."""
        return {name: getattr(self, name) for name in SCORE_FIELDS if getattr(self, name) is not None}


class MarksCreate(Scores):
    student_id: str = Field(min_length=1)
    unit_code: str = Field(min_length=1)


class MarksUpdate(Scores):
    pass


class MarksOut(Scores):
    id: int
    student_id: str
    unit_code: str
    created_at: datetime
    updated_at: datetime
    student: Optional[PersonSummary] = None
    unit: Optional[UnitSummary] = None
