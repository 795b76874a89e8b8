import random
import string
import time
from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import List, Optional
from datetime import datetime

from storefront.models.order_item import OrderItem
from storefront.models.user import User

TRACKING_SUFFIX_CHARS = string.ascii_uppercase + string.digits


def generate_tracking_number() -> str:
    """ORD-<epoch millis>-<9 random alphanumerics>. Unique in practice, not secret."""
    suffix = "".join(random.choices(TRACKING_SUFFIX_CHARS, k=9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    id: Optional[int] = Field(default=None, primary_key=True)
    tracking_number: str = Field(
        default_factory=generate_tracking_number, index=True, unique=True
    )
    user_id: int = Field(foreign_key="users.id", index=True)

    # firstName, lastName, street, city, state, zipCode, country, phone
    shipping_address: dict = Field(sa_column=Column(JSON, nullable=False))
    payment_method: str

    items_price: float = 0.0
    tax_price: float = 0.0
    shipping_price: float = 0.0
    total_price: float = 0.0

    is_paid: bool = Field(default=False)
    paid_at: Optional[datetime] = None
    # id, status, updateTime, emailAddress as reported by the caller
    payment_result: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    is_delivered: bool = Field(default=False)
    delivered_at: Optional[datetime] = None

    status: str = Field(default="pending", index=True)
    notes: str = ""

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # relationships
    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id"},
    )
