"""
Design Routes
===============
Taco design form: shows the ingredient catalog grouped by type, saves a
submitted design and appends it to the session's draft order.
"""

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Request, Depends, Form
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from config.database import get_db
from common.exceptions import ValidationFailed
from common.templating import templates
from common.security import csrf_check, new_csrf_token, CSRF_COOKIE
from modules.auth.deps import require_login, get_session_id
from modules.ingredient.service import ingredient_service
from modules.order.draft import load_draft, store_draft
from modules.taco.models import TacoDesign
from modules.taco.service import taco_repository, validate_design

logger = logging.getLogger("tacocloud.web")

router = APIRouter(tags=["design"])


def _design_page(
    request: Request, db: Session, user, session_id: str,
    name: str = "", selected: Optional[List[str]] = None,
    errors: Optional[Dict[str, str]] = None,
):
    csrf = new_csrf_token()
    response = templates.TemplateResponse("design.html", {
        "request": request,
        "user": user,
        "ingredients_by_type": ingredient_service.group_by_type(ingredient_service.find_all(db)),
        "draft": load_draft(session_id),
        "name": name,
        "selected": set(selected or []),
        "errors": errors or {},
        "csrf_token": csrf,
    })
    response.set_cookie(CSRF_COOKIE, csrf, httponly=True, samesite="lax")
    return response


@router.get("/design", response_class=HTMLResponse)
async def show_design_form(
    request: Request,
    db: Session = Depends(get_db),
    me=Depends(require_login),
    session_id: str = Depends(get_session_id),
):
    logger.info("Designing taco for %s", me.username)
    return _design_page(request, db, me, session_id)


@router.post("/design")
async def process_design(
    request: Request,
    name: str = Form(""),
    ingredients: List[str] = Form([]),
    csrf_token: str = Form(""),
    db: Session = Depends(get_db),
    me=Depends(require_login),
    session_id: str = Depends(get_session_id),
):
    csrf_check(request, csrf_token)

    try:
        validate_design(db, name, ingredients)
    except ValidationFailed as e:
        return _design_page(request, db, me, session_id, name=name, selected=ingredients, errors=e.errors)

    saved = taco_repository.save(db, TacoDesign(name=name.strip(), ingredients=ingredients))

    order = load_draft(session_id)
    order.add_design(saved)
    store_draft(session_id, order)

    return RedirectResponse("/orders/current", status_code=303)
