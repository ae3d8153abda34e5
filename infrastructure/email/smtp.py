"""SMTP implementation of EmailProvider.

- delivery through aiosmtplib (implicit TLS when SMTP_SECURE, STARTTLS
  negotiated otherwise)
- Jinja2 templates next to this module (templates/) for the HTML part
- log-only mode when SMTP host or credentials are not configured: the link
  is written to the log instead of being mailed, handy in development
  (never in production, where only the skip itself is logged)
"""

import os
from email.message import EmailMessage
from typing import Optional
from urllib.parse import quote

import aiosmtplib
from jinja2 import Environment, FileSystemLoader, select_autoescape

from config import EmailSettings
from errors import EmailDeliveryError
from schemas.models.token import TOKEN_TTLS, TokenKind
from schemas.models.user import UserDoc
from shared.logging import get_logger

log = get_logger(__name__)

_DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "templates")


def _hours(kind: TokenKind) -> int:
    return int(TOKEN_TTLS[kind].total_seconds() // 3600)


class SmtpEmailProvider:
    def __init__(
        self,
        settings: EmailSettings,
        frontend_url: str = "http://localhost:3000",
        app_name: str = "L'Os d'Ishango",
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
        log_links: bool = True,
    ) -> None:
        self._settings = settings
        self._log_links = log_links
        self._frontend_url = frontend_url.rstrip("/")
        self._app_name = app_name
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )
        if not settings.is_configured:
            log.warning("smtp_not_configured", mode="log_only")

    def verification_url(self, token: str) -> str:
        return f"{self._frontend_url}/auth/verify-email?token={quote(token)}"

    def reset_url(self, token: str) -> str:
        return f"{self._frontend_url}/auth/reset-password?token={quote(token)}"

    def _build_message(
        self, to_email: str, subject: str, html_body: str, text_body: str
    ) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self._settings.smtp_from
        message["To"] = to_email
        message["Subject"] = subject
        message.set_content(text_body)
        message.add_alternative(html_body, subtype="html")
        return message

    async def _send(
        self,
        to_email: str,
        subject: str,
        html_body: str,
        text_body: str,
        link: Optional[str] = None,
    ) -> None:
        if not self._settings.is_configured:
            if self._log_links:
                log.info("email_delivery_skipped", to_email=to_email, subject=subject, link=link)
            else:
                # links carry live tokens
                log.warning("email_delivery_skipped", to_email=to_email, subject=subject)
            return

        message = self._build_message(to_email, subject, html_body, text_body)
        try:
            await aiosmtplib.send(
                message,
                hostname=self._settings.smtp_host,
                port=self._settings.smtp_port,
                username=self._settings.smtp_user,
                password=self._settings.smtp_pass,
                use_tls=self._settings.smtp_secure,
                timeout=self._settings.smtp_timeout_seconds,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            log.error(
                "email_send_error",
                to_email=to_email,
                subject=subject,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise EmailDeliveryError(f"Could not send email to {to_email}") from e

        log.info("email_sent_success", to_email=to_email, subject=subject)

    async def send_verification_email(self, user: UserDoc, token: str) -> None:
        url = self.verification_url(token)
        hours = _hours(TokenKind.EMAIL_VERIFICATION)
        subject = f"Verify your email - {self._app_name}"
        html_body = self._jinja.get_template("verification.html").render(
            pseudo=user.pseudo, action_url=url, app_name=self._app_name, hours=hours
        )
        text_body = (
            f"Verify your email - {self._app_name}\n\n"
            f"Hello {user.pseudo},\n\n"
            f"Open this link to activate your account:\n{url}\n\n"
            f"This link expires in {hours} hours. "
            f"If you did not create an account, ignore this email."
        )
        await self._send(user.email, subject, html_body, text_body, link=url)

    async def send_password_reset_email(self, user: UserDoc, token: str) -> None:
        url = self.reset_url(token)
        hours = _hours(TokenKind.PASSWORD_RESET)
        subject = f"Reset your password - {self._app_name}"
        html_body = self._jinja.get_template("password_reset.html").render(
            pseudo=user.pseudo, action_url=url, app_name=self._app_name, hours=hours
        )
        text_body = (
            f"Reset your password - {self._app_name}\n\n"
            f"Hello {user.pseudo},\n\n"
            f"Open this link to choose a new password:\n{url}\n\n"
            f"This link expires in {hours} hour(s). "
            f"If you did not ask for a reset, ignore this email."
        )
        await self._send(user.email, subject, html_body, text_body, link=url)
