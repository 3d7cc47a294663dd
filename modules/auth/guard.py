"""
Auth Module - Access Guard
============================
Path-based access rules consulted before any route handler runs.

Rules are checked in order; the first pattern that matches the request path
decides. A role of None means the path is public. Patterns ending in "/**"
match the prefix itself and everything below it.
"""

import logging
import urllib.parse
from typing import Optional, Sequence, Tuple

from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse

from common.security import AUTH_COOKIE, decode_token
from common.templating import templates
from modules.user.models import ROLE_USER

logger = logging.getLogger("tacocloud.auth")

ACCESS_RULES: Sequence[Tuple[str, Optional[str]]] = (
    ("/design", ROLE_USER),
    ("/orders", ROLE_USER),
    ("/orders/**", ROLE_USER),
    ("/**", None),
)

LOGIN_PATH = "/login"


def path_matches(pattern: str, path: str) -> bool:
    if pattern.endswith("/**"):
        prefix = pattern[:-3]
        return not prefix or path == prefix or path.startswith(prefix + "/")
    return path.rstrip("/") == pattern.rstrip("/")


def required_role(path: str, rules: Sequence[Tuple[str, Optional[str]]] = ACCESS_RULES) -> Optional[str]:
    """Role needed to reach `path`, or None when it is public."""
    for pattern, role in rules:
        if path_matches(pattern, path):
            return role
    return None


def principal_from_request(request: Request) -> Optional[dict]:
    """Decoded auth-token payload ({"sub": username, "roles": [...]}) or None."""
    token = request.cookies.get(AUTH_COOKIE)
    if not token:
        return None
    payload = decode_token(token)
    if not payload or not payload.get("sub"):
        return None
    return payload


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def _login_redirect(request: Request) -> RedirectResponse:
    next_url = request.url.path
    if request.url.query:
        next_url += "?" + request.url.query
    return RedirectResponse(f"{LOGIN_PATH}?next={urllib.parse.quote(next_url, safe='')}", status_code=302)


async def access_guard(request: Request, call_next):
    """HTTP middleware enforcing ACCESS_RULES."""
    principal = principal_from_request(request)
    request.state.principal = principal

    role = required_role(request.url.path)
    if role is None:
        return await call_next(request)

    if principal is None:
        if _wants_html(request):
            return _login_redirect(request)
        return JSONResponse({"detail": "login_required"}, status_code=401)

    if role not in (principal.get("roles") or []):
        logger.warning("User %s lacks %s for %s", principal.get("sub"), role, request.url.path)
        if _wants_html(request):
            return templates.TemplateResponse("error.html", {
                "request": request,
                "message": "You do not have access to this page.",
                "retry_url": "/",
            }, status_code=403)
        return JSONResponse({"detail": "forbidden"}, status_code=403)

    return await call_next(request)
