"""
Auth Module - Routes
=====================
Login page, login form submission, logout.
"""

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import RedirectResponse, HTMLResponse
from sqlalchemy.orm import Session

from config.database import get_db
from common.templating import templates
from common.security import new_csrf_token, csrf_check, get_cookie_kwargs, AUTH_COOKIE, CSRF_COOKIE
from common.exceptions import AuthenticationError
from modules.auth.service import auth_service
from modules.auth.deps import get_current_active_user, get_session_id
from modules.order.draft import clear_draft

router = APIRouter(tags=["auth"])


def _safe_next_url(url: str) -> str:
    """Only allow relative paths as redirect targets (prevent open redirect)."""
    if not url or not url.startswith("/") or url.startswith("//"):
        return "/"
    return url


def _login_form(request: Request, username: str = "", next_url: str = "", error: str = None, status_code: int = 200):
    csrf = new_csrf_token()
    response = templates.TemplateResponse("login.html", {
        "request": request,
        "csrf_token": csrf,
        "username": username,
        "next_url": next_url,
        "error": error,
    }, status_code=status_code)
    response.set_cookie(CSRF_COOKIE, csrf, httponly=True, samesite="lax")
    return response


@router.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    next: str = "",
    user=Depends(get_current_active_user),
):
    """Show login page (redirect if already logged in)."""
    if user:
        return RedirectResponse(_safe_next_url(next), status_code=302)
    return _login_form(request, next_url=next)


@router.post("/login")
async def login(
    request: Request,
    username: str = Form(""),
    password: str = Form(""),
    next_url: str = Form(""),
    csrf_token: str = Form(""),
    db: Session = Depends(get_db),
):
    csrf_check(request, csrf_token)

    try:
        token = auth_service.login(db, username, password)
    except AuthenticationError as e:
        return _login_form(request, username=username, next_url=next_url, error=e.message, status_code=401)

    response = RedirectResponse(_safe_next_url(next_url), status_code=302)
    response.set_cookie(AUTH_COOKIE, token, **get_cookie_kwargs())
    return response


@router.api_route("/logout", methods=["GET", "POST"])
async def logout(request: Request, session_id: str = Depends(get_session_id)):
    """Clear auth cookie and the session's draft order, then go home."""
    clear_draft(session_id)
    response = RedirectResponse("/", status_code=302)
    response.delete_cookie(AUTH_COOKIE)
    response.delete_cookie(CSRF_COOKIE)
    return response
