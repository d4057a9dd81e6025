from typing import List

from sqlalchemy.orm import Session

from app.core.audit import AuditLogger
from app.core.errors import ConflictError, NotFoundError, ValidationError
from app.models.unit import Unit
from app.models.user import UserRole
from app.repositories.unit_repository import UnitRepository
from app.repositories.user_repository import UserRepository
from app.schemas.filters import UnitFilter
from app.schemas.students import PersonSummary
from app.schemas.units import UnitCreate, UnitOut, UnitUpdate


class UnitService:
    def __init__(
        self,
        unit_repo: UnitRepository | None = None,
        user_repo: UserRepository | None = None,
        audit: AuditLogger | None = None,
    ):
        self.unit_repo = unit_repo or UnitRepository()
        self.user_repo = user_repo or UserRepository()
        self.audit = audit or AuditLogger()

    def _present(self, db: Session, units: List[Unit]) -> List[UnitOut]:
        staff = self.user_repo.get_many(db, {unit.staff_id for unit in units})
        result = []
        for unit in units:
            out = UnitOut.model_validate(unit)
            member = staff.get(unit.staff_id)
            if member is not None:
                out.staff = PersonSummary.model_validate(member)
            result.append(out)
        return result

    def _require_staff(self, db: Session, staff_id: str) -> None:
        if self.user_repo.find_by_role(db, staff_id, UserRole.STAFF) is None:
            raise NotFoundError("Staff member not found")

    def _get_unit(self, db: Session, unit_code: str) -> Unit:
        unit = self.unit_repo.get(db, unit_code)
        if unit is None:
            raise NotFoundError("Unit not found")
        return unit

    def create_unit(self, db: Session, unit_in: UnitCreate) -> UnitOut:
        if self.unit_repo.get(db, unit_in.unit_code):
            raise ConflictError("Unit code already exists")
        if self.unit_repo.get_by_name(db, unit_in.unit_name):
            raise ConflictError("Unit name already exists")
        self._require_staff(db, unit_in.staff_id)

        unit = self.unit_repo.create(
            db,
            unit_code=unit_in.unit_code,
            unit_name=unit_in.unit_name,
            staff_id=unit_in.staff_id,
        )
        self.audit.audit("CREATE_UNIT", resource_type="Unit", resource_id=unit.unit_code, result="SUCCESS")
        return self._present(db, [unit])[0]

    def list_units(self, db: Session) -> List[UnitOut]:
        units = self._present(db, self.unit_repo.list_all(db))
        self.audit.audit("FETCH_ALL_UNITS", count=len(units))
        return units

    def filter_units(self, db: Session, filters: UnitFilter) -> List[UnitOut]:
        units = self._present(db, self.unit_repo.filter(db, filters))
        self.audit.audit("FILTER_UNITS", filters=filters.model_dump(exclude_none=True), count=len(units))
        return units

    def get_unit(self, db: Session, unit_code: str) -> UnitOut:
        if not unit_code.strip() or unit_code == "undefined":
            raise ValidationError("A valid unit code is required")
        unit = self.unit_repo.get(db, unit_code)
        if unit is None:
            raise NotFoundError(f"No unit found for: {unit_code}")
        self.audit.audit("FETCH_UNIT_BY_CODE", unit_code=unit_code)
        return self._present(db, [unit])[0]

    def update_unit(self, db: Session, unit_code: str, changes: UnitUpdate) -> UnitOut:
        unit = self._get_unit(db, unit_code)

        if changes.new_staff_id:
            self._require_staff(db, changes.new_staff_id)
            unit.staff_id = changes.new_staff_id
        if changes.new_unit_code and changes.new_unit_code != unit.unit_code:
            if self.unit_repo.get(db, changes.new_unit_code):
                raise ConflictError("Unit code already exists")
            unit.unit_code = changes.new_unit_code
        if changes.new_unit_name and changes.new_unit_name != unit.unit_name:
            if self.unit_repo.get_by_name(db, changes.new_unit_name):
                raise ConflictError("Unit name already exists")
            unit.unit_name = changes.new_unit_name

        unit = self.unit_repo.save(db, unit)
        self.audit.audit("UPDATE_UNIT", resource_type="Unit", resource_id=unit_code, result="SUCCESS")
        return self._present(db, [unit])[0]

    def delete_unit(self, db: Session, unit_code: str) -> None:
        unit = self._get_unit(db, unit_code)
        self.unit_repo.delete(db, unit)
        self.audit.audit("DELETE_UNIT", resource_type="Unit", resource_id=unit_code, result="SUCCESS")
