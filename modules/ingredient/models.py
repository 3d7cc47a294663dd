"""
Ingredient Module - Models
============================
Fixed catalog of ingredients a taco can be built from.
"""

import enum
from sqlalchemy import Column, String
from config.database import Base


class IngredientType(str, enum.Enum):
    WRAP = "WRAP"
    PROTEIN = "PROTEIN"
    VEGGIES = "VEGGIES"
    CHEESE = "CHEESE"
    SAUCE = "SAUCE"


class Ingredient(Base):
    __tablename__ = "ingredient"

    id = Column(String(4), primary_key=True)
    name = Column(String(25), nullable=False)
    type = Column(String(10), nullable=False)

    def __repr__(self):
        return f"<Ingredient {self.id} {self.name}>"
