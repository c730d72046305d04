# app/schemas/referral.py
import uuid
from datetime import datetime
from typing import Literal
from urllib.parse import parse_qs, urlsplit

from pydantic import Field, field_validator

from app.schemas.common import CamelModel, MessageResponse

ReferralStatus = Literal["Pending", "Completed"]

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


def extract_referral_code(link: str) -> str | None:
    """
    Return the value of the `ref` query parameter of an absolute
    http(s) URL, or None if the link is malformed or has no code.

    Example:
        https://shop.example/signup?ref=AB12CD -> 'AB12CD'
    """
    try:
        parts = urlsplit(link.strip())
    except ValueError:
        return None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        return None
    codes = parse_qs(parts.query).get("ref")
    if not codes or not codes[0].strip():
        return None
    return codes[0].strip()


class ReferralInvite(CamelModel):
    """
    Payload for inviting a friend.

    referral_link must carry the code as ?ref=<code>.
    """

    friend_email: str = Field(pattern=EMAIL_PATTERN)
    referral_link: str

    @field_validator("referral_link")
    @classmethod
    def must_carry_code(cls, v: str) -> str:
        if extract_referral_code(v) is None:
            raise ValueError("referral link must be an http(s) URL with a ref parameter")
        return v.strip()

    @property
    def referral_code(self) -> str:
        return extract_referral_code(self.referral_link)  # type: ignore[return-value]


class ReferralRead(CamelModel):
    id: uuid.UUID
    referrer_id: str
    referral_code: str
    referred_email: str
    status: ReferralStatus
    reward: str
    discount_code: str | None
    claimed: bool
    created_at: datetime


class RewardListResponse(CamelModel):
    success: bool = True
    rewards: list[ReferralRead]


class RewardClaimed(MessageResponse):
    discount_code: str
