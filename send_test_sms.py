# send_test_sms.py
import sys

from app.core.config import get_settings
from app.core.sms_client import SmsClient


def main() -> int:
    settings = get_settings()

    print("TWILIO_ACCOUNT_SID:", settings.TWILIO_ACCOUNT_SID)
    print("TWILIO_PHONE_NUMBER:", settings.TWILIO_PHONE_NUMBER)
    print("OWNER_PHONE_NUMBER:", settings.OWNER_PHONE_NUMBER)

    if not settings.OWNER_PHONE_NUMBER:
        print("Error sending SMS: OWNER_PHONE_NUMBER is not set")
        return 1

    try:
        client = SmsClient.from_settings(settings)
        sid = client.send_sms(settings.OWNER_PHONE_NUMBER, "Test SMS from Twilio")
    except Exception as e:
        print("Error sending SMS:", e)
        return 1

    print("SMS sent:", sid)
    return 0


if __name__ == "__main__":
    sys.exit(main())
