"""
Auth Module - Service Layer
=============================
Credential check and auth-token issuance.
"""

import logging

from sqlalchemy.orm import Session

from common.security import create_token
from modules.user.models import User
from modules.user.service import user_service

logger = logging.getLogger("tacocloud.auth")


class AuthService:

    def login(self, db: Session, username: str, password: str) -> str:
        """Verify credentials and return a signed token. Raises AuthenticationError."""
        user = user_service.authenticate(db, username, password)
        logger.info("User %s logged in", user.username)
        return self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return create_token({"sub": user.username, "roles": sorted(user.roles)})


# Singleton
auth_service = AuthService()
