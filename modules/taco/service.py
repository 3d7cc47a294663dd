"""
Taco Module - Service Layer
=============================
Design validation and the taco write path.
"""

import logging
from typing import List

from sqlalchemy.orm import Session

from common.exceptions import ValidationFailed
from common.helpers import now_utc
from common.storage import insert_returning_key, insert_row, translate_errors
from config.database import unit_of_work
from modules.ingredient.service import ingredient_service
from modules.taco.models import Taco, TacoIngredient, TacoDesign

logger = logging.getLogger("tacocloud.taco")

NAME_MIN_LENGTH = 5
NAME_MAX_LENGTH = 50


def validate_design(db: Session, name: str, ingredient_ids: List[str]):
    """Raise ValidationFailed with per-field messages if the design is not acceptable."""
    errors = {}
    name = (name or "").strip()
    if len(name) < NAME_MIN_LENGTH:
        errors["name"] = f"Name must be at least {NAME_MIN_LENGTH} characters long"
    elif len(name) > NAME_MAX_LENGTH:
        errors["name"] = f"Name must be at most {NAME_MAX_LENGTH} characters long"

    if not ingredient_ids:
        errors["ingredients"] = "You must choose at least 1 ingredient"
    else:
        known = ingredient_service.find_by_ids(db, ingredient_ids)
        unknown = [i for i in ingredient_ids if i not in known]
        if unknown:
            errors["ingredients"] = f"Unknown ingredient(s): {', '.join(unknown)}"
    if errors:
        raise ValidationFailed(errors)


class TacoRepository:

    def save(self, db: Session, design: TacoDesign) -> TacoDesign:
        """
        Persist a design and its ingredient selections in one transaction.
        Stamps created_at and sets the generated id on the design.
        """
        design.created_at = now_utc()
        with translate_errors("Saving taco"), unit_of_work(db):
            taco_id = insert_returning_key(db, Taco.__table__, {
                "name": design.name,
                "created_at": design.created_at,
            })
            for position, ingredient_id in enumerate(design.ingredients):
                insert_row(db, TacoIngredient.__table__, {
                    "taco": taco_id,
                    "position": position,
                    "ingredient": ingredient_id,
                })
        design.id = taco_id
        logger.info("Saved taco %s (%r, %d ingredients)", taco_id, design.name, len(design.ingredients))
        return design


# Singleton
taco_repository = TacoRepository()
