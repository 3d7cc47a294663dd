"""
Order Module - Models
======================
Order header, its taco associations, and the in-session Order value.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Index, Table
from sqlalchemy.orm import relationship
from config.database import Base

from common.helpers import as_utc
from modules.taco.models import TacoDesign


class TacoOrder(Base):
    __tablename__ = "taco_order"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)

    # Delivery
    delivery_name = Column(String(50), nullable=False)
    delivery_address = Column(String(50), nullable=False)
    delivery_city = Column(String(50), nullable=False)
    delivery_state = Column(String(2), nullable=False)
    delivery_zip = Column(String(10), nullable=False)

    # Payment
    cc_number = Column(String(19), nullable=False)
    cc_expiration = Column(String(5), nullable=False)
    cc_cvv = Column(String(3), nullable=False)

    placed_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User")

    __table_args__ = (
        Index("ix_taco_order_user_placed", "user_id", "placed_at"),
    )


# One row per (order, taco) pair. No identity of its own and no uniqueness:
# the same taco may appear more than once in an order.
taco_order_tacos = Table(
    "taco_order_tacos",
    Base.metadata,
    Column("taco_order", Integer, ForeignKey("taco_order.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("taco", Integer, ForeignKey("taco.id", ondelete="RESTRICT"), nullable=False),
)

# Scalar fields written to taco_order, in column order. Anything not listed
# here is never persisted.
ORDER_COLUMNS = (
    "delivery_name",
    "delivery_address",
    "delivery_city",
    "delivery_state",
    "delivery_zip",
    "cc_number",
    "cc_expiration",
    "cc_cvv",
    "placed_at",
)

DELIVERY_FIELDS = ORDER_COLUMNS[:5]
PAYMENT_FIELDS = ORDER_COLUMNS[5:8]


@dataclass
class Order:
    """
    An order as assembled during a browsing session. Created empty, grows one
    taco per design submission, and is persisted once at checkout.
    """
    delivery_name: str = ""
    delivery_address: str = ""
    delivery_city: str = ""
    delivery_state: str = ""
    delivery_zip: str = ""
    cc_number: str = ""
    cc_expiration: str = ""
    cc_cvv: str = ""
    placed_at: Optional[datetime] = None
    user_id: Optional[int] = None
    id: Optional[int] = None
    tacos: List[TacoDesign] = field(default_factory=list)

    def add_design(self, taco: TacoDesign):
        self.tacos.append(taco)

    def to_row(self) -> dict:
        """Column values for the taco_order header insert."""
        row = {name: getattr(self, name) for name in ORDER_COLUMNS}
        row["user_id"] = self.user_id
        return row

    def to_dict(self) -> dict:
        data = {name: getattr(self, name) for name in DELIVERY_FIELDS + PAYMENT_FIELDS}
        data["id"] = self.id
        data["user_id"] = self.user_id
        data["placed_at"] = self.placed_at.isoformat() if self.placed_at else None
        data["tacos"] = [t.to_dict() for t in self.tacos]
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Order":
        placed_at = data.get("placed_at")
        return cls(
            id=data.get("id"),
            user_id=data.get("user_id"),
            placed_at=as_utc(datetime.fromisoformat(placed_at)) if placed_at else None,
            tacos=[TacoDesign.from_dict(t) for t in data.get("tacos") or []],
            **{name: data.get(name) or "" for name in DELIVERY_FIELDS + PAYMENT_FIELDS},
        )
