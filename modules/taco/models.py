"""
Taco Module - Models
======================
A taco design and its ordered ingredient selections.

`Taco` / `TacoIngredient` are the stored rows; `TacoDesign` is the plain
value the web layer builds from a form and keeps in the session draft.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from config.database import Base

from common.helpers import as_utc


class Taco(Base):
    __tablename__ = "taco"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)

    ingredient_links = relationship(
        "TacoIngredient", order_by="TacoIngredient.position",
        cascade="all, delete-orphan",
    )


class TacoIngredient(Base):
    __tablename__ = "taco_ingredients"

    taco = Column(Integer, ForeignKey("taco.id", ondelete="CASCADE"), primary_key=True)
    position = Column(Integer, primary_key=True)
    ingredient = Column(String(4), ForeignKey("ingredient.id", ondelete="RESTRICT"), nullable=False)


@dataclass
class TacoDesign:
    """A taco as submitted from the design form. `id` is None until saved."""
    name: str
    ingredients: List[str] = field(default_factory=list)  # ingredient ids, in selection order
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "ingredients": list(self.ingredients),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TacoDesign":
        created_at = data.get("created_at")
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            ingredients=list(data.get("ingredients") or []),
            created_at=as_utc(datetime.fromisoformat(created_at)) if created_at else None,
        )
