"""User service - staff management and the active-user directory"""

from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from tbs.models.user import User
from tbs.schemas.user import StaffCreate, StaffUpdate, UserRole
from tbs.core.security import DEFAULT_BCRYPT_ROUNDS, get_password_hash
from tbs.core.exceptions import (
    AdminDeletionError,
    DuplicateEmailError,
    ResourceNotFoundError,
)

DEMO_USERS = (
    {"name": "Danny Tighe", "email": "danny@tbs.local", "role": "admin", "position": "Managing Director"},
    {"name": "Pat", "email": "pat@tbs.local", "role": "foreman", "position": "Foreman"},
    {"name": "Adam", "email": "adam@tbs.local", "role": "foreman", "position": "Foreman"},
    {"name": "Charlie", "email": "charlie@tbs.local", "role": "labourer", "position": "Labourer"},
)


class UserService:
    """Service for user management"""

    def __init__(self, bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS, logger: Optional[logging.Logger] = None):
        self.bcrypt_rounds = bcrypt_rounds
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def _email_taken(db: Session, email: str, exclude_id: Optional[int] = None) -> bool:
        query = db.query(User.id).filter(func.lower(User.email) == email.lower())
        if exclude_id is not None:
            query = query.filter(User.id != exclude_id)
        return query.first() is not None

    def _get_or_404(self, db: Session, user_id: int, resource: str = "Staff member") -> User:
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(resource)
        return user

    @staticmethod
    def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
        """Get user by ID"""
        return db.query(User).filter(User.id == user_id).first()

    @staticmethod
    def list_active_users(db: Session, roles: Optional[List[str]] = None) -> List[User]:
        """
        Active users ordered by name, optionally restricted to some roles

        Args:
            db: Database session
            roles: Role names to keep; None or empty keeps all

        Returns:
            List of users
        """
        query = db.query(User).filter(User.status == "active")
        if roles:
            query = query.filter(User.role.in_(roles))
        return query.order_by(User.name).all()

    def get_active_user(self, db: Session, user_id: int) -> User:
        user = db.query(User).filter(User.id == user_id, User.status == "active").first()
        if not user:
            raise ResourceNotFoundError("User")
        return user

    @staticmethod
    def list_staff(db: Session) -> List[User]:
        return db.query(User).order_by(User.name).all()

    def get_staff(self, db: Session, user_id: int) -> User:
        return self._get_or_404(db, user_id)

    def create_staff(self, db: Session, data: StaffCreate) -> User:
        """
        Onboard a staff member

        Args:
            db: Database session
            data: Validated staff payload (email already lower-cased)

        Returns:
            Created user
        """
        if self._email_taken(db, data.email):
            raise DuplicateEmailError()

        user = User(
            name=data.name,
            email=data.email,
            phone=data.phone or None,
            role=data.role.value,
            position=data.position,
            password_hash=get_password_hash(data.password, self.bcrypt_rounds),
        )
        db.add(user)
        db.commit()
        db.refresh(user)

        self.logger.info("Staff member created", extra={"staff_id": user.id, "role": user.role})
        return user

    def update_staff(self, db: Session, user_id: int, data: StaffUpdate) -> User:
        user = self._get_or_404(db, user_id)
        changes = data.model_dump(exclude_unset=True)

        email = changes.get("email")
        if email and email != user.email and self._email_taken(db, email, exclude_id=user.id):
            raise DuplicateEmailError()

        for field in ("name", "email", "role", "position", "status"):
            value = changes.get(field)
            if value:
                setattr(user, field, value.value if hasattr(value, "value") else value)
        if "phone" in changes:
            user.phone = changes["phone"] or None

        db.commit()
        db.refresh(user)

        self.logger.info("Staff member updated", extra={"staff_id": user.id, "fields": sorted(changes)})
        return user

    def delete_staff(self, db: Session, user_id: int) -> None:
        """
        Delete a staff member; admin accounts are refused

        Refresh tokens go with the user through the foreign key cascade.
        """
        user = self._get_or_404(db, user_id)
        if user.role == UserRole.ADMIN.value:
            raise AdminDeletionError()

        db.delete(user)
        db.commit()

        self.logger.info("Staff member removed", extra={"staff_id": user_id})

    def seed_demo_users(self, db: Session, password: str) -> int:
        """Insert the demo accounts when the users table is empty; returns rows added"""
        if db.query(User.id).first() is not None:
            return 0

        password_hash = get_password_hash(password, self.bcrypt_rounds)
        db.add_all([User(password_hash=password_hash, **entry) for entry in DEMO_USERS])
        db.commit()

        self.logger.info("Seeded demo users", extra={"count": len(DEMO_USERS)})
        return len(DEMO_USERS)
