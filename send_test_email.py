# send_test_email.py

from app.core.config import get_settings
from app.core.email_client import EmailClient


def main():
    settings = get_settings()
    client = EmailClient.from_settings(settings)
    to_email = settings.OWNER_EMAIL or settings.SMTP_USERNAME

    print(f"Sending test email to {to_email}...")

    client.send_email(
        to_email=to_email,
        subject=f"[{settings.STORE_NAME}] Test Email",
        text_body="This is a plain text test email from the shop backend.",
        html_body="<h1>HTML Test Email</h1><p>This is a <b>test</b> email.</p>",
    )

    print("If no errors: email sent! Check your inbox.")


if __name__ == "__main__":
    main()
