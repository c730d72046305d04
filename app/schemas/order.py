# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, MessageResponse

OrderStatus = Literal["Pending", "Accepted", "Rejected", "Delivered"]
PaymentMethod = Literal["cod"]

MOBILE_NUMBER_PATTERN = r"^[0-9]{10}$"


class CartItem(CamelModel):
    """
    Snapshot of a storefront product inside an order.
    """

    id: str
    name: str
    price: float = Field(ge=0, allow_inf_nan=False)
    # Fractional for items sold by weight (1.5 kg)
    quantity: float = Field(gt=0, allow_inf_nan=False)
    image: str = ""
    category: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v):
        # Storefront product ids are sometimes numeric
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class OrderCreate(CamelModel):
    """
    Payload for placing an order.

    Field order matters: validation errors are reported for the first
    failing field, so checks run cart -> address -> mobile -> payment ->
    price.

    Backend derives:
      - status = 'Pending'
      - created_at
    """

    cart_items: list[CartItem] = Field(min_length=1)
    delivery_address: str
    mobile_number: str = Field(pattern=MOBILE_NUMBER_PATTERN)
    payment_method: PaymentMethod
    total_price: float = Field(gt=0, strict=True, allow_inf_nan=False)

    alt_mobile_number: str | None = None
    referral_code: str | None = None

    @field_validator("delivery_address")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("alt_mobile_number", "referral_code")
    @classmethod
    def normalize_optional(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderRead(CamelModel):
    """
    Order as returned by the list endpoints.
    """

    id: uuid.UUID
    cart_items: list[CartItem]
    delivery_address: str
    mobile_number: str
    alt_mobile_number: str | None
    payment_method: str
    total_price: float
    status: OrderStatus
    created_at: datetime
    delivered_at: datetime | None


class OrderCreated(MessageResponse):
    order_id: uuid.UUID


class OrderListResponse(CamelModel):
    success: bool = True
    orders: list[OrderRead]
