from typing import Optional

from sqlalchemy.orm import Session

from app.models.unit import Unit
from app.schemas.filters import UnitFilter


class UnitRepository:
    def get(self, db: Session, unit_code: str) -> Optional[Unit]:
        return db.query(Unit).filter(Unit.unit_code == unit_code).first()

    def get_by_name(self, db: Session, unit_name: str) -> Optional[Unit]:
        return db.query(Unit).filter(Unit.unit_name == unit_name).first()

    def get_many(self, db: Session, unit_codes: set[str]) -> dict[str, Unit]:
        if not unit_codes:
            return {}
        units = db.query(Unit).filter(Unit.unit_code.in_(unit_codes)).all()
        return {unit.unit_code: unit for unit in units}

    def create(self, db: Session, unit_code: str, unit_name: str, staff_id: str) -> Unit:
        unit = Unit(unit_code=unit_code, unit_name=unit_name, staff_id=staff_id)
        return self.save(db, unit)

    def save(self, db: Session, unit: Unit) -> Unit:
        db.add(unit)
        db.commit()
        db.refresh(unit)
        return unit

    def delete(self, db: Session, unit: Unit) -> None:
        db.delete(unit)
        db.commit()

    def list_all(self, db: Session) -> list[Unit]:
        return db.query(Unit).order_by(Unit.unit_code.asc()).all()

    def filter(self, db: Session, filters: UnitFilter, limit: int = 50) -> list[Unit]:
        query = db.query(Unit)
        if filters.unit_code:
            query = query.filter(Unit.unit_code.like(f"%{filters.unit_code}%"))
        if filters.unit_name:
            query = query.filter(Unit.unit_name.like(f"%{filters.unit_name}%"))
        if filters.staff_id:
            query = query.filter(Unit.staff_id == filters.staff_id)
        return query.order_by(Unit.unit_code.asc()).limit(limit).all()
