"""
Order Routes
==============
Current-order form, checkout, and the user's order history.
"""

import logging
from typing import Dict, Optional

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from config.database import get_db
from config.settings import ORDERS_PAGE_SIZE
from common.exceptions import ValidationFailed
from common.flash import flash
from common.helpers import card_digits
from common.templating import templates
from common.security import csrf_check, new_csrf_token, CSRF_COOKIE
from modules.auth.deps import require_login, get_session_id
from modules.order.draft import load_draft, store_draft, clear_draft
from modules.order.models import Order, DELIVERY_FIELDS, PAYMENT_FIELDS
from modules.order.service import order_repository, validate_order_form

logger = logging.getLogger("tacocloud.web")

router = APIRouter(prefix="/orders", tags=["orders"])


def _prefill_from_profile(order: Order, user):
    """Fill blank delivery fields from the user's profile."""
    if not order.delivery_name:
        order.delivery_name = user.fullname or ""
    if not order.delivery_address:
        order.delivery_address = user.street or ""
    if not order.delivery_city:
        order.delivery_city = user.city or ""
    if not order.delivery_state:
        order.delivery_state = user.state or ""
    if not order.delivery_zip:
        order.delivery_zip = user.zip or ""


def _order_page(request: Request, user, order: Order, errors: Optional[Dict[str, str]] = None, status_code: int = 200):
    csrf = new_csrf_token()
    response = templates.TemplateResponse("order_form.html", {
        "request": request,
        "user": user,
        "order": order,
        "errors": errors or {},
        "csrf_token": csrf,
    }, status_code=status_code)
    response.set_cookie(CSRF_COOKIE, csrf, httponly=True, samesite="lax")
    return response


@router.get("/current", response_class=HTMLResponse)
async def order_form(
    request: Request,
    me=Depends(require_login),
    session_id: str = Depends(get_session_id),
):
    order = load_draft(session_id)
    _prefill_from_profile(order, me)
    return _order_page(request, me, order)


@router.post("")
async def process_order(
    request: Request,
    delivery_name: str = Form(""),
    delivery_address: str = Form(""),
    delivery_city: str = Form(""),
    delivery_state: str = Form(""),
    delivery_zip: str = Form(""),
    cc_number: str = Form(""),
    cc_expiration: str = Form(""),
    cc_cvv: str = Form(""),
    csrf_token: str = Form(""),
    db: Session = Depends(get_db),
    me=Depends(require_login),
    session_id: str = Depends(get_session_id),
):
    csrf_check(request, csrf_token)

    submitted = {
        "delivery_name": delivery_name, "delivery_address": delivery_address,
        "delivery_city": delivery_city, "delivery_state": delivery_state,
        "delivery_zip": delivery_zip, "cc_number": cc_number,
        "cc_expiration": cc_expiration, "cc_cvv": cc_cvv,
    }

    order = load_draft(session_id)
    for name in DELIVERY_FIELDS + PAYMENT_FIELDS:
        setattr(order, name, submitted[name].strip())

    try:
        validate_order_form(submitted)
    except ValidationFailed as e:
        # Keep what was typed so the form survives the next design round-trip
        store_draft(session_id, order)
        return _order_page(request, me, order, errors=e.errors)

    order.cc_number = card_digits(order.cc_number)
    order.user_id = me.id
    order_repository.save(db, order)
    clear_draft(session_id)

    flash(request, f"Order #{order.id} placed. Your tacos are on the way!", "success")
    return RedirectResponse("/", status_code=303)


@router.get("", response_class=HTMLResponse)
async def order_history(
    request: Request,
    db: Session = Depends(get_db),
    me=Depends(require_login),
):
    orders = order_repository.find_by_user(db, me.id, limit=ORDERS_PAGE_SIZE)
    taco_counts = order_repository.count_tacos(db, [o.id for o in orders])
    return templates.TemplateResponse("orders.html", {
        "request": request,
        "user": me,
        "orders": orders,
        "taco_counts": taco_counts,
    })
