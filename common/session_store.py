"""
Session Store
===============
Process-local store of per-browser-session values (the draft order),
keyed by a random session id carried in a cookie.

Values are kept as JSON text so only serializable state survives between
requests. Every save refreshes the entry's expiry; expired entries read as
absent and are removed by purge_expired() (run by the background scheduler).
"""

import json
import secrets
import threading
from datetime import datetime, timedelta
from typing import Dict, Optional, Tuple

from common.helpers import now_utc
from config.settings import DRAFT_EXPIRE_MINUTES

SESSION_COOKIE = "tc_session"


def new_session_id() -> str:
    return secrets.token_urlsafe(24)


class SessionStore:

    def __init__(self, ttl_minutes: int = 30):
        self.ttl = timedelta(minutes=ttl_minutes)
        self._entries: Dict[str, Tuple[str, datetime]] = {}
        self._lock = threading.Lock()

    def load(self, session_id: str) -> Optional[dict]:
        """Return the stored value, or None when missing or expired."""
        if not session_id:
            return None
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None:
                return None
            payload, expires_at = entry
            if expires_at <= now_utc():
                del self._entries[session_id]
                return None
        return json.loads(payload)

    def save(self, session_id: str, value: dict):
        payload = json.dumps(value)
        with self._lock:
            self._entries[session_id] = (payload, now_utc() + self.ttl)

    def discard(self, session_id: str):
        with self._lock:
            self._entries.pop(session_id, None)

    def purge_expired(self) -> int:
        """Drop every expired entry. Returns how many were removed."""
        now = now_utc()
        with self._lock:
            expired = [sid for sid, (_, exp) in self._entries.items() if exp <= now]
            for sid in expired:
                del self._entries[sid]
        return len(expired)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)


# Singleton
session_store = SessionStore(ttl_minutes=DRAFT_EXPIRE_MINUTES)
