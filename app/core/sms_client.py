# app/core/sms_client.py
from twilio.rest import Client

from app.core.config import Settings


class SmsClient:
    """
    Thin wrapper around the Twilio REST client.

    Only used by send_test_sms.py to check that the Twilio credentials
    in .env actually work; the HTTP API does not send SMS.
    """

    def __init__(self, account_sid: str, auth_token: str, from_number: str):
        self.client = Client(account_sid, auth_token)
        self.from_number = from_number

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmsClient":
        """
        Raises:
            RuntimeError: if any TWILIO_* setting is missing.
        """
        if not (
            settings.TWILIO_ACCOUNT_SID
            and settings.TWILIO_AUTH_TOKEN
            and settings.TWILIO_PHONE_NUMBER
        ):
            raise RuntimeError(
                "Twilio is not configured. Please set TWILIO_ACCOUNT_SID, "
                "TWILIO_AUTH_TOKEN, and TWILIO_PHONE_NUMBER in .env."
            )
        return cls(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            settings.TWILIO_PHONE_NUMBER,
        )

    def send_sms(self, to_number: str, body: str) -> str:
        """Send a single SMS and return the Twilio message SID."""
        message = self.client.messages.create(
            body=body,
            from_=self.from_number,
            to=to_number,
        )
        return message.sid
