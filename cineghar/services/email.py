"""
Outgoing mail — password reset links.

Bodies are rendered from jinja2 templates and sent over SMTP in a worker
thread. With no ``SMTP_HOST`` configured the link is logged instead, which
is what local development and the test suite rely on.
"""

from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from urllib.parse import quote

from jinja2 import Template
from starlette.concurrency import run_in_threadpool

from cineghar.core.config import settings

logger = logging.getLogger(__name__)

RESET_TEXT_TEMPLATE = Template(
    """You requested a password reset for your {{ app_name }} account.

Open the link below to set a new password (valid for {{ expires_in }} minutes):

{{ reset_url }}

If you did not request this, you can ignore this email.
"""
)

RESET_HTML_TEMPLATE = Template(
    """<p>You requested a password reset for your {{ app_name }} account.</p>
<p>Click the link below to set a new password (valid for {{ expires_in }} minutes):</p>
<p><a href="{{ reset_url }}" style="color: #8B0000;">Reset password</a></p>
<p>If the link doesn't work, copy and paste this URL into your browser:</p>
<p style="word-break: break-all;">{{ reset_url }}</p>
<p>If you did not request this, you can safely ignore this email.</p>
""",
    autoescape=True,
)


def build_reset_url(token: str) -> str:
    return f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={quote(token)}"


class EmailService:
    def _send(self, message: MIMEMultipart) -> None:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=10) as smtp:
            if settings.SMTP_USE_TLS:
                smtp.starttls()
            if settings.SMTP_USER and settings.SMTP_PASS:
                smtp.login(settings.SMTP_USER, settings.SMTP_PASS)
            smtp.send_message(message)

    async def send_password_reset(self, to: str, token: str) -> None:
        reset_url = build_reset_url(token)
        if not settings.SMTP_HOST:
            logger.info("SMTP not configured; password reset link for %s: %s", to, reset_url)
            return

        context = {
            "app_name": settings.PROJECT_NAME,
            "reset_url": reset_url,
            "expires_in": settings.RESET_TOKEN_EXPIRE_MINUTES,
        }
        message = MIMEMultipart("alternative")
        message["Subject"] = f"Reset your password - {settings.PROJECT_NAME}"
        message["From"] = settings.MAIL_FROM
        message["To"] = to
        message.attach(MIMEText(RESET_TEXT_TEMPLATE.render(**context), "plain"))
        message.attach(MIMEText(RESET_HTML_TEMPLATE.render(**context), "html"))

        await run_in_threadpool(self._send, message)
        logger.info("Password reset email sent to %s", to)


email_service = EmailService()
