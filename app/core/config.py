# app/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Required env vars (.env):
      - DATABASE_URL (Postgres connection string)

    Needed for notifications:
      - SMTP_HOST, SMTP_USERNAME, SMTP_PASSWORD
      - OWNER_EMAIL (receives new-order emails)

    Optional:
      - TWILIO_* / OWNER_PHONE_NUMBER (only used by send_test_sms.py)
    """

    PROJECT_NAME: str = "Abdul's Chicken API"
    API_PREFIX: str = "/api"

    HOST: str = "0.0.0.0"
    PORT: int = 5001

    DATABASE_URL: str

    CORS_ORIGINS: list[str] = ["https://chicken-mutton-shop.vercel.app"]

    # SMTP
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Abdul's Chicken"
    SMTP_USE_TLS: bool = True
    SMTP_USE_SSL: bool = False
    SMTP_TIMEOUT: int = 30

    # Store owner
    OWNER_EMAIL: str | None = None
    OWNER_DASHBOARD_URL: str = "http://localhost:3000/owner-dashboard"

    STORE_NAME: str = "Abdul's Chicken"
    CURRENCY_SYMBOL: str = "₹"

    # Referrals
    REFERRER_PLACEHOLDER_ID: str = "mockUser123"
    REFERRAL_REWARD: str = "₹100 Discount"
    DISCOUNT_CODE_PREFIX: str = "DISCOUNT"

    # Twilio (diagnostic script only)
    TWILIO_ACCOUNT_SID: str | None = None
    TWILIO_AUTH_TOKEN: str | None = None
    TWILIO_PHONE_NUMBER: str | None = None
    OWNER_PHONE_NUMBER: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
