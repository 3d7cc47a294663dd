"""
Ingredient Module - Service Layer
===================================
Read-only catalog lookups used by the design form and its validation.
"""

from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from modules.ingredient.models import Ingredient, IngredientType


# Provisioned by scripts/seed.py
DEFAULT_INGREDIENTS = [
    ("FLTO", "Flour Tortilla", IngredientType.WRAP),
    ("COTO", "Corn Tortilla", IngredientType.WRAP),
    ("GRBF", "Ground Beef", IngredientType.PROTEIN),
    ("CARN", "Carnitas", IngredientType.PROTEIN),
    ("TMTO", "Diced Tomatoes", IngredientType.VEGGIES),
    ("LETC", "Lettuce", IngredientType.VEGGIES),
    ("CHED", "Cheddar", IngredientType.CHEESE),
    ("JACK", "Monterrey Jack", IngredientType.CHEESE),
    ("SLSA", "Salsa", IngredientType.SAUCE),
    ("SRCR", "Sour Cream", IngredientType.SAUCE),
]


class IngredientService:

    def find_all(self, db: Session) -> List[Ingredient]:
        return db.query(Ingredient).order_by(Ingredient.id).all()

    def find_by_ids(self, db: Session, ids: Iterable[str]) -> Dict[str, Ingredient]:
        """Map of id -> Ingredient for the ids that exist in the catalog."""
        ids = set(ids)
        if not ids:
            return {}
        rows = db.query(Ingredient).filter(Ingredient.id.in_(ids)).all()
        return {row.id: row for row in rows}

    def group_by_type(self, ingredients: Iterable[Ingredient]) -> Dict[str, List[Ingredient]]:
        """
        Split ingredients by type, keyed by the lowercase type name
        ("wrap", "protein", ...). Every type gets a key, even if empty.
        """
        grouped = {t.value.lower(): [] for t in IngredientType}
        for ingredient in ingredients:
            grouped.setdefault(str(ingredient.type).lower(), []).append(ingredient)
        return grouped

    def seed_defaults(self, db: Session) -> int:
        """Insert any missing default ingredients. Returns how many were added."""
        existing = {row.id for row in db.query(Ingredient.id).all()}
        added = 0
        for ing_id, name, ing_type in DEFAULT_INGREDIENTS:
            if ing_id in existing:
                continue
            db.add(Ingredient(id=ing_id, name=name, type=ing_type.value))
            added += 1
        db.flush()
        return added


# Singleton
ingredient_service = IngredientService()
