"""
User Module - Models
======================
Customer accounts. Roles are stored as a JSON list and exposed as a set.
"""

import json

from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text
from sqlalchemy.sql import func
from config.database import Base


ROLE_USER = "ROLE_USER"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)

    # === Identity ===
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String, nullable=False)  # hash_password() output, never plain text

    # === Profile ===
    fullname = Column(String, nullable=True)
    street = Column(String, nullable=True)
    city = Column(String, nullable=True)
    state = Column(String(2), nullable=True)
    zip = Column(String(10), nullable=True)
    phone_number = Column(String, nullable=True)

    # === Roles ===
    _roles = Column("roles", Text, nullable=True)  # JSON list
    is_active = Column(Boolean, default=True, server_default="1", nullable=False)

    # === Audit ===
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    @property
    def roles(self) -> set:
        if not self._roles:
            return set()
        try:
            return set(json.loads(self._roles))
        except (ValueError, TypeError):
            return set()

    @roles.setter
    def roles(self, value):
        self._roles = json.dumps(sorted(value or []))

    def has_role(self, role: str) -> bool:
        return role in self.roles

    @property
    def display_name(self) -> str:
        return self.fullname or self.username

    def __repr__(self):
        return f"<User {self.username}>"
