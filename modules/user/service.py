"""
User Module - Service Layer
=============================
Account lookup and credential checks. Accounts are provisioned by the seeder.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy.orm import Session

from common.exceptions import AuthenticationError
from common.security import hash_password, verify_password
from modules.user.models import User, ROLE_USER

logger = logging.getLogger("tacocloud.auth")


class UserService:

    def find_by_username(self, db: Session, username: str) -> Optional[User]:
        if not username:
            return None
        return db.query(User).filter(User.username == username.strip()).first()

    def authenticate(self, db: Session, username: str, password: str) -> User:
        """Return the active user whose password matches, else raise AuthenticationError."""
        user = self.find_by_username(db, username)
        if not user or not user.is_active or not verify_password(password or "", user.password):
            logger.warning("Failed login for username=%r", username)
            raise AuthenticationError("Invalid username or password.")
        return user

    def create_user(
        self, db: Session, username: str, password: str,
        roles: Iterable[str] = (ROLE_USER,), **profile,
    ) -> User:
        """Create an account with a hashed password. Used by scripts/seed.py and tests."""
        user = User(username=username.strip(), password=hash_password(password), **profile)
        user.roles = set(roles)
        db.add(user)
        db.flush()
        return user


# Singleton
user_service = UserService()
