"""
Auth Module - Dependencies
===========================
FastAPI dependencies for the current user and the browsing session id.
These are injected into route handlers via Depends().
"""

from fastapi import Request, Depends, HTTPException, status
from sqlalchemy.orm import Session

from config.database import get_db
from common.session_store import SESSION_COOKIE
from modules.auth.guard import principal_from_request
from modules.user.models import User
from modules.user.service import user_service


def get_current_active_user(request: Request, db: Session = Depends(get_db)):
    """
    Identify the current user from the auth_token cookie.
    Returns User object or None.
    """
    principal = getattr(request.state, "principal", None) or principal_from_request(request)
    if not principal:
        return None

    user = user_service.find_by_username(db, principal["sub"])
    if not user or not user.is_active:
        return None
    return user


def require_login(user=Depends(get_current_active_user)) -> User:
    """Require an authenticated active user. Raises 401 if not logged in."""
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="login_required")
    return user


def get_session_id(request: Request) -> str:
    """Browsing-session id assigned by the session middleware in main.py."""
    return getattr(request.state, "session_id", None) or request.cookies.get(SESSION_COOKIE, "")
