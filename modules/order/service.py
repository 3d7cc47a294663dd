"""
Order Module - Service Layer
===============================
Checkout form validation, the order write path, and order history reads.
"""

import logging
import re
from typing import Dict, List

from sqlalchemy import func, desc
from sqlalchemy.orm import Session

from common.exceptions import InvalidOrderState, ValidationFailed
from common.helpers import now_utc, is_valid_card_number, is_valid_cc_expiration
from common.storage import insert_returning_key, insert_row, translate_errors
from config.database import unit_of_work
from modules.order.models import Order, TacoOrder, taco_order_tacos

logger = logging.getLogger("tacocloud.order")

_REQUIRED_DELIVERY = {
    "delivery_name": "Delivery name is required",
    "delivery_address": "Street is required",
    "delivery_city": "City is required",
    "delivery_state": "State is required",
    "delivery_zip": "Zip code is required",
}

# Widths of the taco_order columns
_MAX_LENGTHS = {
    "delivery_name": 50,
    "delivery_address": 50,
    "delivery_city": 50,
    "delivery_state": 2,
    "delivery_zip": 10,
}


def validate_order_form(data: Dict[str, str]):
    """Raise ValidationFailed with per-field messages if the delivery/payment form is not acceptable."""
    errors = {}
    for name, message in _REQUIRED_DELIVERY.items():
        if not (data.get(name) or "").strip():
            errors[name] = message
        elif len(data[name].strip()) > _MAX_LENGTHS[name]:
            errors[name] = f"Must be at most {_MAX_LENGTHS[name]} characters"

    if not is_valid_card_number(data.get("cc_number", "")):
        errors["cc_number"] = "Not a valid credit card number"
    if not is_valid_cc_expiration(data.get("cc_expiration", "")):
        errors["cc_expiration"] = "Must be formatted MM/YY"
    if not re.fullmatch(r"\d{3}", (data.get("cc_cvv") or "").strip()):
        errors["cc_cvv"] = "Invalid CVV"
    if errors:
        raise ValidationFailed(errors)


class OrderRepository:

    # ==========================================
    # Write path
    # ==========================================

    def save(self, db: Session, order: Order) -> Order:
        """
        Persist an order header and one association row per taco as a
        single transaction, then return the order with its generated id.

        placed_at is always set here, replacing whatever the caller had.
        Every taco must already have been saved (have an id); otherwise
        InvalidOrderState is raised and nothing is written. Saving the same
        Order twice creates two orders.
        """
        unsaved = [i for i, taco in enumerate(order.tacos) if taco.id is None]
        if unsaved:
            logger.error("Refusing to save order with unsaved tacos at positions %s", unsaved)
            raise InvalidOrderState("Order contains tacos that have not been saved.")

        order.placed_at = now_utc()
        try:
            with translate_errors("Saving order"), unit_of_work(db):
                order.id = insert_returning_key(db, TacoOrder.__table__, order.to_row())
                for taco in order.tacos:
                    insert_row(db, taco_order_tacos, {"taco_order": order.id, "taco": taco.id})
        except Exception:
            order.id = None
            order.placed_at = None
            raise

        logger.info("Saved order %s with %d taco(s)", order.id, len(order.tacos))
        return order

    # ==========================================
    # Reads
    # ==========================================

    def find_by_user(self, db: Session, user_id: int, limit: int = 20) -> List[TacoOrder]:
        """The user's most recent orders, newest first."""
        return (
            db.query(TacoOrder)
            .filter(TacoOrder.user_id == user_id)
            .order_by(desc(TacoOrder.placed_at), desc(TacoOrder.id))
            .limit(limit)
            .all()
        )

    def count_tacos(self, db: Session, order_ids: List[int]) -> Dict[int, int]:
        """{order_id: number of association rows} for the given orders."""
        if not order_ids:
            return {}
        rows = (
            db.query(taco_order_tacos.c.taco_order, func.count())
            .filter(taco_order_tacos.c.taco_order.in_(order_ids))
            .group_by(taco_order_tacos.c.taco_order)
            .all()
        )
        counts = {oid: 0 for oid in order_ids}
        counts.update({oid: cnt for oid, cnt in rows})
        return counts


# Singleton
order_repository = OrderRepository()
