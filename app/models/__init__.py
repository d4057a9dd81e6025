from app.models.enrollment import Enrollment
from app.models.evidence import Evidence, EvidenceType
from app.models.mark import Marks
from app.models.unit import Unit
from app.models.user import Gender, User, UserRole

__all__ = ["User", "UserRole", "Gender", "Unit", "Enrollment", "Marks", "Evidence", "EvidenceType"]
