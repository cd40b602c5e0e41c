from __future__ import annotations

import logging
import uuid
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import DuplicateEmail, Forbidden, InvalidCredentials, NotFound, UserInUse, ValidationError
from app.core.security import create_access_token, hash_password, verify_password
from app.models.alert import AlertRecord
from app.models.freight_job import FreightJob
from app.models.user import User, UserRole
from app.models.vehicle import Vehicle

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserService:
    """Credential store: user records, password checks and token issuing."""

    def __init__(self, db: Session):
        self.db = db

    # -------- lookups --------
    def get(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if not user:
            raise NotFound("User not found")
        return user

    def find_by_email(self, email: str) -> Optional[User]:
        return self.db.scalars(select(User).where(User.email == normalize_email(email))).first()

    # -------- registration / login --------
    def create(
        self,
        name: str,
        email: str,
        password: str,
        role: UserRole = UserRole.DRIVER,
        tax_id: Optional[str] = None,
        phone: Optional[str] = None,
        is_active: bool = True,
    ) -> User:
        email = normalize_email(email)
        name = name.strip()
        if not name:
            raise ValidationError("name is required")

        if self.find_by_email(email):
            raise DuplicateEmail()

        user = User(
            id=str(uuid.uuid4()),
            name=name,
            email=email,
            role=role,
            password_hash=hash_password(password),
            tax_id=_clean(tax_id),
            phone=_clean(phone),
            is_active=is_active,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race on the unique email index
            self.db.rollback()
            raise DuplicateEmail()
        self.db.refresh(user)
        logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
        return user

    def register(self, name: str, email: str, password: str, tax_id=None, phone=None) -> tuple[User, str]:
        """Public sign-up. Always creates a driver."""
        user = self.create(name, email, password, role=UserRole.DRIVER, tax_id=tax_id, phone=phone)
        return user, create_access_token(subject=user.id, role=user.role.value)

    def authenticate(self, email: str, password: str) -> tuple[User, str]:
        user = self.find_by_email(email)
        if not user:
            raise NotFound("User not found")
        if not verify_password(password, user.password_hash):
            raise InvalidCredentials()
        if not user.is_active:
            raise Forbidden("User inactive")
        return user, create_access_token(subject=user.id, role=user.role.value)

    # -------- self-service --------
    def update_profile(self, user: User, name=None, phone=None, tax_id=None) -> User:
        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError("name cannot be blank")
            user.name = name
        if phone is not None:
            user.phone = _clean(phone)
        if tax_id is not None:
            user.tax_id = _clean(tax_id)
        self.db.commit()
        self.db.refresh(user)
        return user

    def set_push_token(self, user: User, token: str, platform: Optional[str] = None) -> User:
        token = token.strip()
        if not token:
            raise ValidationError("token is required")
        user.push_token = token
        user.push_platform = platform
        self.db.commit()
        self.db.refresh(user)
        return user

    def clear_push_token(self, user: User) -> User:
        user.push_token = None
        user.push_platform = None
        self.db.commit()
        self.db.refresh(user)
        return user

    # -------- admin --------
    def list_users(self, role: Optional[UserRole] = None, q: Optional[str] = None) -> list[User]:
        query = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if q:
            like = f"%{q.strip()}%"
            query = query.where(or_(User.name.ilike(like), User.email.ilike(like), User.phone.ilike(like)))
        return list(self.db.scalars(query.order_by(User.role.asc(), User.name.asc())))

    def update_user(self, admin: User, user_id: str, **changes) -> User:
        user = self.get(user_id)

        # safety: don't brick yourself
        if user.id == admin.id:
            role = changes.get("role")
            if role is not None and role != UserRole.ADMIN:
                raise ValidationError("You cannot change your own role")
            if changes.get("is_active") is False:
                raise ValidationError("You cannot deactivate your own account")

        email = changes.get("email")
        if email is not None:
            email = normalize_email(email)
            other = self.find_by_email(email)
            if other and other.id != user.id:
                raise DuplicateEmail("Another user already has this email")
            user.email = email

        if changes.get("name") is not None:
            name = changes["name"].strip()
            if not name:
                raise ValidationError("name cannot be blank")
            user.name = name
        if changes.get("phone") is not None:
            user.phone = _clean(changes["phone"])
        if changes.get("tax_id") is not None:
            user.tax_id = _clean(changes["tax_id"])
        if changes.get("role") is not None:
            user.role = changes["role"]
        if changes.get("is_active") is not None:
            user.is_active = changes["is_active"]

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise DuplicateEmail("Another user already has this email")
        self.db.refresh(user)
        return user

    def reset_password(self, admin: User, user_id: str, new_password: str) -> None:
        user = self.get(user_id)
        if user.id == admin.id:
            raise ValidationError("You cannot reset your own password here")
        user.password_hash = hash_password(new_password)
        self.db.commit()

    def delete_user(self, admin: User, user_id: str) -> None:
        user = self.get(user_id)
        if user.id == admin.id:
            raise ValidationError("You cannot delete your own account")

        has_vehicles = self.db.scalars(select(Vehicle.id).where(Vehicle.owner_id == user.id).limit(1)).first()
        has_jobs = self.db.scalars(
            select(FreightJob.id)
            .where(or_(FreightJob.driver_id == user.id, FreightJob.created_by_id == user.id))
            .limit(1)
        ).first()
        if has_vehicles or has_jobs:
            raise UserInUse()

        self.db.query(AlertRecord).filter(AlertRecord.user_id == user.id).delete(synchronize_session=False)
        self.db.delete(user)
        self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id, "admin_id": admin.id})
