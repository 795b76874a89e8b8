from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from storefront.constants.order_status import OrderStatus, PaymentMethod

ADDRESS_FIELDS = (
    "first_name",
    "last_name",
    "street",
    "city",
    "state",
    "zip_code",
    "country",
    "phone",
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class OrderItemIn(CamelModel):
    product: int
    name: Optional[str] = None
    image: Optional[str] = None
    price: Optional[float] = None
    quantity: int = Field(ge=1)


class ShippingAddress(CamelModel):
    first_name: str
    last_name: str
    street: str
    city: str
    state: str
    zip_code: str
    country: str
    phone: str


class OrderCreate(CamelModel):
    order_items: List[OrderItemIn]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    items_price: float
    tax_price: float
    shipping_price: float
    total_price: float
    notes: str = ""

    @model_validator(mode="before")
    @classmethod
    def check_items_and_address(cls, data):
        if not isinstance(data, dict):
            return data
        items = data.get("orderItems", data.get("order_items"))
        if not isinstance(items, list) or not items:
            raise ValueError("No order items")
        address = data.get("shippingAddress", data.get("shipping_address"))
        if not isinstance(address, dict):
            raise ValueError("Shipping address is incomplete")
        for field in ADDRESS_FIELDS:
            value = address.get(to_camel(field), address.get(field))
            if not isinstance(value, str) or not value.strip():
                raise ValueError("Shipping address is incomplete")
        return data

    @field_validator("payment_method", mode="before")
    @classmethod
    def check_payment_method(cls, v):
        if v not in [m.value for m in PaymentMethod]:
            raise ValueError("Invalid payment method")
        return v

    @field_validator("items_price", "tax_price", "shipping_price", "total_price", mode="before")
    @classmethod
    def check_price(cls, v):
        # numbers only, no numeric strings
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("Invalid price values")
        if v < 0:
            raise ValueError("Price values must not be negative")
        return v


class Payer(BaseModel):
    email_address: Optional[str] = None


class PaymentResultIn(BaseModel):
    """Gateway result as reported by the client. Not verified with the gateway."""

    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None
    payer: Optional[Payer] = None

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "status": self.status,
            "updateTime": self.update_time,
            "emailAddress": self.payer.email_address if self.payer else None,
        }


class OrderStatusUpdate(BaseModel):
    status: OrderStatus

    @field_validator("status", mode="before")
    @classmethod
    def check_status(cls, v):
        if v not in [s.value for s in OrderStatus]:
            raise ValueError("Invalid order status")
        return v
