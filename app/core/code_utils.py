# app/core/code_utils.py
import secrets
import string
from datetime import datetime, timezone

DISCOUNT_CODE_ALPHABET = string.ascii_uppercase + string.digits
DISCOUNT_CODE_LENGTH = 8


def utcnow() -> datetime:
    """Default clock for services; tests inject a fixed one instead."""
    return datetime.now(timezone.utc)


def generate_discount_code(
    prefix: str = "DISCOUNT",
    length: int = DISCOUNT_CODE_LENGTH,
) -> str:
    """
    Generate a discount code using the `secrets` module.

    Args:
        prefix: Fixed leading part of the code.
        length: Number of random uppercase alphanumeric characters.

    Returns:
        A code like "DISCOUNT7KQ2M9XA"
    """
    suffix = "".join(secrets.choice(DISCOUNT_CODE_ALPHABET) for _ in range(length))
    return f"{prefix}{suffix}"
