"""
Notification dispatcher.

Renders community emails and hands them to the email sender. Every method
reports success as a bool and never raises: a booking or an approval must not
fail because an email could not be delivered.
"""

import logging
from datetime import datetime
from typing import Optional

from .config import BUSINESS_NOTIFICATION_EMAIL, EMAIL_FROM_ADDRESS, FRONTEND_URL
from .email_service import EmailDeliveryError, ResendEmailSender, compile_mjml_to_html
from .email_templates import (
    a_team_approved_template,
    a_team_welcome_template,
    booking_confirmation_template,
    member_welcome_template,
    membership_approved_template,
)

logger = logging.getLogger(__name__)


def format_slot_label(start_time: datetime) -> str:
    """e.g. 'Tuesday, June 10, 2025 at 09:00 UTC'"""
    return start_time.strftime("%A, %B %d, %Y at %H:%M UTC")


class NotificationDispatcher:
    def __init__(
        self,
        sender=None,
        from_address: str = EMAIL_FROM_ADDRESS,
        owner_email: Optional[str] = BUSINESS_NOTIFICATION_EMAIL,
        login_url: str = f"{FRONTEND_URL}/login",
    ):
        self.sender = sender or ResendEmailSender()
        self.from_address = from_address
        self.owner_email = owner_email
        self.login_url = login_url

    async def _deliver(self, to: str, subject: str, text: str, mjml_content: str) -> bool:
        try:
            html = compile_mjml_to_html(mjml_content)
        except EmailDeliveryError as e:
            # Plain text still goes out
            logger.warning(f"⚠️ Sending '{subject}' without HTML body: {e}")
            html = None

        try:
            await self.sender.send(to, self.from_address, subject, text, html)
            return True
        except Exception as e:
            logger.warning(f"⚠️ Notification '{subject}' to {to} not delivered: {e}")
            return False

    async def booking_confirmed(
        self, to: str, client_name: str, service: str, start_time: datetime
    ) -> bool:
        when = format_slot_label(start_time)
        text = f"Hi {client_name},\n\nYour {service} appointment is booked for {when}.\n"
        mjml_content = booking_confirmation_template(client_name, service, when)
        delivered = await self._deliver(to, "Appointment Confirmed", text, mjml_content)

        if self.owner_email:
            await self._deliver(
                self.owner_email,
                f"New booking: {service} on {when}",
                f"{client_name} <{to}> booked {service} for {when}.\n",
                booking_confirmation_template(client_name, service, when),
            )
        return delivered

    async def membership_approved(self, to: str, name: str) -> bool:
        text = (
            f"Hi {name},\n\nYour membership request has been approved. "
            f"Log in at {self.login_url}\n"
        )
        return await self._deliver(
            to,
            "Your Raven membership is approved",
            text,
            membership_approved_template(name, self.login_url),
        )

    async def member_welcome(self, to: str, name: str, password: str) -> bool:
        text = (
            f"Hi {name},\n\nYour account has been approved. Here are your login credentials:\n"
            f"Username: {to}\nPassword: {password}\n\n"
            "Please change your password after your first login.\n"
        )
        return await self._deliver(
            to,
            "Welcome to the Raven Community!",
            text,
            member_welcome_template(name, to, password, self.login_url),
        )

    async def a_team_approved(self, to: str, name: str) -> bool:
        text = f"Hi {name},\n\nYour A-Team application has been approved.\n"
        return await self._deliver(
            to,
            "Your A-Team application is approved",
            text,
            a_team_approved_template(name, self.login_url),
        )

    async def a_team_welcome(self, to: str, name: str, password: str) -> bool:
        text = (
            f"Hi {name},\n\nYour A-Team application has been approved. Temporary credentials:\n"
            f"Username: {to}\nPassword: {password}\n\n"
            "Please change your password after your first login.\n"
        )
        return await self._deliver(
            to,
            "Welcome to the A-Team",
            text,
            a_team_welcome_template(name, to, password, self.login_url),
        )


def get_notifier() -> NotificationDispatcher:
    """FastAPI dependency; tests override it with a recording sender"""
    return NotificationDispatcher()
