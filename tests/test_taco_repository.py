"""Taco write path and design validation."""

import pytest
from sqlalchemy import func

from common.exceptions import PersistenceRejected, ValidationFailed
from modules.taco.models import Taco, TacoIngredient, TacoDesign
from modules.taco.service import taco_repository, validate_design


def test_save_assigns_id_and_keeps_ingredient_order(db):
    design = TacoDesign(name="Veggie Supreme", ingredients=["COTO", "TMTO", "LETC", "SLSA"])

    saved = taco_repository.save(db, design)

    assert saved.id is not None
    assert saved.created_at is not None
    stored = db.get(Taco, saved.id)
    assert stored.name == "Veggie Supreme"
    assert [link.ingredient for link in stored.ingredient_links] == ["COTO", "TMTO", "LETC", "SLSA"]


def test_unknown_ingredient_is_rejected_by_storage_and_rolled_back(db):
    with pytest.raises(PersistenceRejected):
        taco_repository.save(db, TacoDesign(name="Mystery Meat", ingredients=["FLTO", "NOPE"]))

    assert db.query(func.count(Taco.id)).scalar() == 0
    assert db.query(func.count(TacoIngredient.taco)).scalar() == 0


@pytest.mark.parametrize(
    "name,ingredients,bad_fields",
    [
        ("Taco", ["FLTO"], {"name"}),
        ("", [], {"name", "ingredients"}),
        ("Perfectly named", [], {"ingredients"}),
        ("Perfectly named", ["FLTO", "XXXX"], {"ingredients"}),
        ("X" * 51, ["FLTO"], {"name"}),
    ],
)
def test_validate_design_reports_bad_fields(db, name, ingredients, bad_fields):
    with pytest.raises(ValidationFailed) as exc_info:
        validate_design(db, name, ingredients)
    assert set(exc_info.value.errors) == bad_fields


def test_validate_design_accepts_catalog_ingredients(db):
    validate_design(db, "Classic Carnitas", ["FLTO", "CARN", "CHED", "SRCR"])


def test_validate_design_accepts_name_at_column_width(db):
    validate_design(db, "X" * 50, ["FLTO"])
