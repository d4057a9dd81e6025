from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.security import get_current_identity, require_roles
from app.routers.deps import unit_filter
from app.schemas.common import ok
from app.schemas.filters import UnitFilter
from app.schemas.units import UnitCreate, UnitUpdate
from app.services.units import UnitService

router = APIRouter(prefix="/api/units", tags=["units"], dependencies=[Depends(get_current_identity)])
unit_service = UnitService()
authorize_staff = require_roles("staff")


@router.post("", status_code=status.HTTP_201_CREATED)
def create_unit(unit_in: UnitCreate, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    unit = unit_service.create_unit(db, unit_in)
    return ok(unit, message="Unit created successfully")


@router.get("")
def list_units(db: Session = Depends(get_db)) -> dict:
    units = unit_service.list_units(db)
    return ok(units, count=len(units))


@router.get("/filter")
def filter_units(filters: UnitFilter = Depends(unit_filter), db: Session = Depends(get_db)) -> dict:
    units = unit_service.filter_units(db, filters)
    return ok(units, count=len(units))


@router.get("/search/{identifier}")
def get_unit(identifier: str, db: Session = Depends(get_db)) -> dict:
    return ok(unit_service.get_unit(db, identifier))


@router.put("/{unit_code}")
def update_unit(
    unit_code: str,
    changes: UnitUpdate,
    db: Session = Depends(get_db),
    _=Depends(authorize_staff),
) -> dict:
    unit = unit_service.update_unit(db, unit_code, changes)
    return ok(unit, message="Unit updated successfully")


@router.delete("/{unit_code}")
def delete_unit(unit_code: str, db: Session = Depends(get_db), _=Depends(authorize_staff)) -> dict:
    unit_service.delete_unit(db, unit_code)
    return ok(message="Unit deleted successfully")
