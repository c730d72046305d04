# app/models/referral.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Referral(SQLModel, table=True):
    """
    Referral invitation sent by a customer to a friend.

    Lifecycle:
      - status: Pending -> Completed (an order arrived with referral_code)
      - claimed: False -> True once, only when Completed

    referral_code is a soft link to orders; there is no foreign key.
    """

    __tablename__ = "referrals"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    # Placeholder until the storefront has real user accounts
    referrer_id: str = Field(index=True)

    referral_code: str = Field(
        index=True,
        description="Code taken from the ?ref= parameter of the shared link",
    )

    referred_email: str = Field(
        description="Email address the invitation was sent to",
    )

    # Pending | Completed
    status: str = Field(
        default="Pending",
        index=True,
    )

    reward: str = Field(default="₹100 Discount")

    discount_code: str | None = Field(
        default=None,
        description="Assigned when the referral is completed or claimed",
    )

    claimed: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
