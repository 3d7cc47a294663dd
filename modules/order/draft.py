"""
Order Module - Session Draft
==============================
The order being assembled in the current browsing session, stored as a
serialized value in the session store.
"""

from common.session_store import session_store
from modules.order.models import Order


def load_draft(session_id: str) -> Order:
    """Current draft for this session, or a fresh empty order."""
    data = session_store.load(session_id)
    return Order.from_dict(data) if data else Order()


def store_draft(session_id: str, order: Order):
    session_store.save(session_id, order.to_dict())


def clear_draft(session_id: str):
    session_store.discard(session_id)
