"""
Flash Messages
================
One-shot messages that survive a redirect, kept in the session store next
to the draft order.

Usage in routes:
    flash(request, "Order #12 placed.", "success")
    return RedirectResponse("/", status_code=303)

Usage in templates (auto-available via Jinja2 globals):
    {% for msg in get_flashed_messages(request) %}
        <div class="alert alert-{{ msg.category }}">{{ msg.text }}</div>
    {% endfor %}
"""

from typing import List, Optional

from fastapi import Request

from common.session_store import session_store


def _flash_key(request: Request) -> Optional[str]:
    session_id = getattr(request.state, "session_id", None)
    return f"flash:{session_id}" if session_id else None


def flash(request: Request, message: str, category: str = "info"):
    """Queue a message for the next page this browser renders."""
    key = _flash_key(request)
    if not key:
        return
    pending = (session_store.load(key) or {}).get("messages", [])
    pending.append({"text": message, "category": category})
    session_store.save(key, {"messages": pending})


def get_flashed_messages(request: Request) -> List[dict]:
    """Pending messages for this browser; reading them clears them."""
    key = _flash_key(request)
    if not key:
        return []
    data = session_store.load(key)
    if not data:
        return []
    session_store.discard(key)
    return data.get("messages", [])
