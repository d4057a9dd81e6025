from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.models.user import User, UserRole
from app.schemas.filters import StudentFilter


class UserRepository:
    """Credential store and student lookups over the ``users`` table."""

    def find_by_user_id_or_email(self, db: Session, user_id: str, email: str) -> Optional[User]:
        return db.query(User).filter(or_(User.user_id == user_id, User.email == email)).first()

    def find_by_user_id(self, db: Session, user_id: str) -> Optional[User]:
        return db.query(User).filter(User.user_id == user_id).first()

    def find_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email).first()

    def find_by_refresh_token(self, db: Session, refresh_token: str) -> Optional[User]:
        return db.query(User).filter(User.refresh_token == refresh_token).first()

    def find_by_role(self, db: Session, user_id: str, role: UserRole) -> Optional[User]:
        return db.query(User).filter(User.user_id == user_id, User.role == role).first()

    def get_many(self, db: Session, user_ids: set[str]) -> dict[str, User]:
        if not user_ids:
            return {}
        users = db.query(User).filter(User.user_id.in_(user_ids)).all()
        return {user.user_id: user for user in users}

    def create(self, db: Session, **fields) -> User:
        user = User(**fields)
        return self.save(db, user)

    def save(self, db: Session, user: User) -> User:
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    def delete(self, db: Session, user: User) -> None:
        db.delete(user)
        db.commit()

    def list_students(self, db: Session) -> list[User]:
        return (
            db.query(User)
            .filter(User.role == UserRole.STUDENT)
            .order_by(User.created_at.desc())
            .all()
        )

    def filter_students(self, db: Session, filters: StudentFilter, limit: int = 100) -> list[User]:
        query = db.query(User).filter(User.role == UserRole.STUDENT)
        if filters.department:
            query = query.filter(User.department.like(f"%{filters.department}%"))
        if filters.level:
            query = query.filter(User.level == filters.level)
        if filters.gender:
            query = query.filter(User.gender == filters.gender)
        return query.order_by(User.created_at.desc()).limit(limit).all()

    def search_students(self, db: Session, identifier: str, limit: int = 50) -> list[User]:
        pattern = f"%{identifier}%"
        return (
            db.query(User)
            .filter(
                User.role == UserRole.STUDENT,
                or_(User.user_id.like(pattern), User.email.like(pattern)),
            )
            .limit(limit)
            .all()
        )
