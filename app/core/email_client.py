# app/core/email_client.py
"""
Email client for the shop backend.

Responsibilities:
  - Hold SMTP configuration taken from Settings.
  - Provide a single send_email(...) method for services to use.
  - Support both TLS (STARTTLS) and SSL connections.

Typical .env configuration (Gmail example with App Password):

    SMTP_HOST=smtp.gmail.com
    SMTP_PORT=465
    SMTP_USERNAME=shop@gmail.com
    SMTP_PASSWORD=<app password>
    SMTP_FROM_EMAIL=shop@gmail.com
    SMTP_FROM_NAME=Abdul's Chicken
    SMTP_USE_TLS=false
    SMTP_USE_SSL=true

The client is constructed once in the app lifespan and handed to request
handlers through the get_email_client dependency.
"""
from __future__ import annotations

import smtplib
from email.message import EmailMessage

from fastapi import Request

from app.core.config import Settings


class EmailClient:
    def __init__(
        self,
        host: str | None,
        port: int,
        username: str | None,
        password: str | None,
        from_email: str | None = None,
        from_name: str = "Abdul's Chicken",
        use_tls: bool = True,
        use_ssl: bool = False,
        timeout: int = 30,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        # Fallback: if FROM_EMAIL is not set, default to username
        self.from_email = from_email or username or ""
        self.from_name = from_name
        self.use_tls = use_tls
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailClient":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            from_email=settings.SMTP_FROM_EMAIL,
            from_name=settings.SMTP_FROM_NAME,
            use_tls=settings.SMTP_USE_TLS,
            use_ssl=settings.SMTP_USE_SSL,
            timeout=settings.SMTP_TIMEOUT,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.host and self.username and self.password)

    def _create_smtp_client(self) -> smtplib.SMTP:
        """
        Create and return an SMTP client configured for TLS or SSL.

        Priority:
          - If use_ssl is True → smtplib.SMTP_SSL (e.g., Gmail on 465).
          - Else → smtplib.SMTP + optional STARTTLS if use_tls is True.

        NOTE:
          - Typical configs:
              * SSL: SMTP_PORT=465, SMTP_USE_SSL=true,  SMTP_USE_TLS=false
              * TLS: SMTP_PORT=587, SMTP_USE_SSL=false, SMTP_USE_TLS=true
        """
        if not self.host:
            raise RuntimeError("SMTP_HOST is not configured. Please set it in .env.")

        if self.use_ssl:
            server: smtplib.SMTP = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            if self.use_tls:
                server.starttls()

        return server

    def _require_config(self) -> None:
        if not self.is_configured:
            raise RuntimeError(
                "SMTP is not configured correctly. "
                "Please set SMTP_HOST, SMTP_USERNAME, and SMTP_PASSWORD in .env."
            )

    def verify(self) -> None:
        """
        Open a connection and authenticate without sending anything.

        Raises:
            RuntimeError: if required SMTP configuration is missing.
            smtplib.SMTPException: if connecting or logging in fails.
        """
        self._require_config()
        server = self._create_smtp_client()
        try:
            server.login(self.username, self.password)  # type: ignore[arg-type]
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                pass

    def send_email(
        self,
        to_email: str,
        subject: str,
        text_body: str,
        html_body: str | None = None,
    ) -> None:
        """
        Send an email to a single recipient.

        Parameters
        ----------
        to_email:
            Recipient email address.
        subject:
            Email subject line.
        text_body:
            Plain-text body (fallback for clients without HTML support).
        html_body:
            Optional HTML body; if provided, is sent as an alternative part.

        Raises
        ------
        RuntimeError:
            If required SMTP configuration is missing.
        smtplib.SMTPException:
            If the underlying SMTP connection or send fails.
        """
        self._require_config()

        msg = EmailMessage()

        from_header = (
            f"{self.from_name} <{self.from_email}>"
            if self.from_email
            else self.username
        )
        msg["From"] = from_header
        msg["To"] = to_email
        msg["Subject"] = subject

        msg.set_content(text_body)

        if html_body:
            msg.add_alternative(html_body, subtype="html")

        server = self._create_smtp_client()
        try:
            server.login(self.username, self.password)  # type: ignore[arg-type]
            server.send_message(msg)
        finally:
            try:
                server.quit()
            except smtplib.SMTPException:
                # Connection is being torn down anyway.
                pass


def get_email_client(request: Request) -> EmailClient:
    """FastAPI dependency returning the client built at startup."""
    return request.app.state.email_client
