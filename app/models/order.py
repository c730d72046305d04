# app/models/order.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Column
from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order placed from the storefront.

    Line items are stored inline as a JSON array of
    {id, name, price, quantity, image, category}; there is no product
    table to reference.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    cart_items: list[dict[str, Any]] = Field(
        default_factory=list,
        sa_column=Column(JSON, nullable=False),
    )

    delivery_address: str = Field(
        description="Full delivery address",
    )
    mobile_number: str = Field(
        max_length=10,
        description="Contact phone number (10 digits)",
    )
    alt_mobile_number: str | None = Field(
        default=None,
        description="Optional alternate contact number",
    )

    # Cash on delivery is the only supported method
    payment_method: str = Field(default="cod")

    total_price: float = Field(
        description="Total amount shown to the customer at checkout",
    )

    # Pending | Accepted | Rejected | Delivered
    status: str = Field(
        default="Pending",
        index=True,
        description="Order status lifecycle",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )

    # Set only on the Accepted -> Delivered transition
    delivered_at: datetime | None = Field(
        default=None,
        description="Delivery timestamp (UTC)",
    )
