"""User registration and credential checks."""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from timeless.core.config import get_config
from timeless.core.exceptions import AuthenticationError, NotFoundError, ValidationError
from timeless.core.security import hash_password, verify_password
from timeless.models import User, UserRole
from timeless.services.base_service import BaseService


class UserService(BaseService):
    def __init__(self, db: Session | None = None) -> None:
        super().__init__(db)
        self.config = get_config()

    def find_by_email(self, email: str) -> User | None:
        stmt = select(User).where(func.lower(User.email) == email.strip().lower())
        return self.db.execute(stmt).scalars().first()

    def get_user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def register(self, email: str, full_name: str, password: str, role: UserRole) -> User:
        if role == UserRole.ADMIN:
            raise ValidationError("Admin accounts cannot be self-registered.")
        if self.find_by_email(email) is not None:
            raise ValidationError("Email is already registered.")

        user = User(
            email=email.strip().lower(),
            full_name=full_name.strip(),
            hashed_password=hash_password(password, iterations=self.config.PASSWORD_HASH_ITERATIONS),
            role=role,
        )
        with self.write("user.register", role=role.value):
            self.db.add(user)
        self.db.refresh(user)
        return user

    def authenticate(self, email: str, password: str) -> User:
        user = self.find_by_email(email)
        if user is None or not user.is_active or not verify_password(password, user.hashed_password):
            raise AuthenticationError("Invalid credentials.")
        return user
