"""
Taco Cloud - Security Utilities
=================================
JWT tokens, CSRF protection and password hashing.
"""

import hmac
import hashlib
import logging
import secrets
from datetime import timedelta
from typing import Optional

from fastapi import Request, HTTPException
from jose import jwt, JWTError

from config.settings import (
    SECRET_KEY, PASSWORD_PEPPER, PASSWORD_HASH_ITERATIONS, ALGORITHM,
    ACCESS_TOKEN_EXPIRE_MINUTES, CSRF_ENABLED,
)
from common.helpers import now_utc

logger = logging.getLogger("tacocloud.security")

AUTH_COOKIE = "auth_token"
CSRF_COOKIE = "csrf_token"


# ==========================================
# Passwords
# ==========================================

_HASH_SCHEME = "pbkdf2_sha256"


def hash_password(raw: str, iterations: int = PASSWORD_HASH_ITERATIONS) -> str:
    """
    Salted, peppered PBKDF2-SHA256.
    Stored as 'pbkdf2_sha256$<iterations>$<salt hex>$<digest hex>';
    verify_password() reads the iteration count back from the stored value.
    """
    salt = secrets.token_bytes(16)
    digest = _digest(raw, salt, iterations)
    return f"{_HASH_SCHEME}${iterations}${salt.hex()}${digest}"


def verify_password(raw: str, encoded: str) -> bool:
    """Constant-time comparison against a value produced by hash_password()."""
    try:
        scheme, iterations, salt_hex, expected = encoded.split("$")
        iterations = int(iterations)
        salt = bytes.fromhex(salt_hex)
    except (ValueError, AttributeError):
        return False
    if scheme != _HASH_SCHEME or iterations < 1:
        return False
    return hmac.compare_digest(_digest(raw, salt, iterations), expected)


def _digest(raw: str, salt: bytes, iterations: int) -> str:
    secret = (PASSWORD_PEPPER + raw).encode("utf-8")
    return hashlib.pbkdf2_hmac("sha256", secret, salt, iterations).hex()


# ==========================================
# JWT Tokens
# ==========================================

def create_token(data: dict) -> str:
    """Create a signed auth token. `data` carries sub (username) and roles."""
    to_encode = data.copy()
    to_encode["exp"] = now_utc() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict]:
    """Decode a JWT token. Returns payload or None."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None


# ==========================================
# Cookie Helpers
# ==========================================

def get_cookie_kwargs() -> dict:
    """Standard cookie settings for auth tokens."""
    from config.settings import COOKIE_SECURE, COOKIE_SAMESITE
    return dict(
        httponly=True,
        secure=COOKIE_SECURE,
        samesite=COOKIE_SAMESITE,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )


# ==========================================
# CSRF
# ==========================================

def new_csrf_token() -> str:
    """Generate a new random CSRF token."""
    return secrets.token_urlsafe(32)


def csrf_check(request: Request, form_token: Optional[str] = None):
    """
    Verify CSRF token from cookie matches the one in header or form.
    Raises HTTPException(403) on mismatch.
    """
    if not CSRF_ENABLED:
        return

    cookie_token = request.cookies.get(CSRF_COOKIE)
    header_token = request.headers.get("X-CSRF-Token")
    token = header_token or form_token

    if not cookie_token or not token or not hmac.compare_digest(cookie_token, token):
        logger.warning("CSRF check failed on %s", request.url.path)
        raise HTTPException(403, "CSRF token missing or invalid")
