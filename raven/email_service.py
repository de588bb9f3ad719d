"""
Email transport using Resend.

``ResendEmailSender`` is the outbound notification port: it either delivers a
message or raises. Callers that must not fail because of email go through
``raven.notifications.NotificationDispatcher``.
"""

import logging
from typing import Optional

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    """Raised when the transport could not hand off a message"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {str(e)}") from e


class ResendEmailSender:
    """send(to, from_address, subject, text, html) -> provider response"""

    def __init__(self, api_key: Optional[str] = RESEND_API_KEY):
        self.api_key = api_key

    async def send(
        self,
        to: str,
        from_address: Optional[str],
        subject: str,
        text: str,
        html: Optional[str] = None,
    ) -> dict:
        if not self.api_key:
            logger.error("❌ No email service configured - RESEND_API_KEY missing")
            raise EmailDeliveryError("Email service not configured")

        email_data = {
            "from": from_address or EMAIL_FROM_ADDRESS,
            "to": [to],
            "subject": subject,
            "text": text,
        }
        if html:
            email_data["html"] = html

        resend.api_key = self.api_key
        try:
            logger.info(f"📧 Sending email via Resend to: {to}")
            response = resend.Emails.send(email_data)
            logger.info(f"✅ Email sent successfully via Resend: {response}")
            return response
        except Exception as e:
            logger.error(f"❌ Email send error to {to}: {e}")
            raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e
