"""Booking ledger - conflict-checked appointment creation"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...errors import ConflictError, ValidationError
from ...models import Appointment
from ...notifications import NotificationDispatcher
from ...utils.sanitization import sanitize_string
from ..clients.service import ClientDirectory
from .availability import (
    BusinessHours,
    as_naive_utc,
    booked_hours_for,
    compute_availability,
    day_bounds,
)
from .repository import AppointmentRepository

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class BookingLedger:
    """Service layer for availability and booking"""

    def __init__(
        self,
        db: Session,
        business_hours: BusinessHours,
        notifier: NotificationDispatcher,
        clients: Optional[ClientDirectory] = None,
    ):
        self.db = db
        self.business_hours = business_hours
        self.notifier = notifier
        self.clients = clients or ClientDirectory(db)
        self.repo = AppointmentRepository()

    def available_slots(self, day: date, now: Optional[datetime] = None) -> list[str]:
        start, end = day_bounds(day)
        start_times = self.repo.get_start_times_between(self.db, start, end)
        return compute_availability(
            day,
            self.business_hours,
            booked_hours_for(day, start_times),
            now if now is not None else utc_now(),
        )

    def client_appointments(self, client_id: int) -> list[Appointment]:
        client = self.clients.get_client(client_id)
        return self.repo.get_for_client(self.db, client.id)

    async def book_slot(
        self,
        client_name: str,
        client_email: str,
        service: str,
        start_time: datetime,
        password: Optional[str] = None,
    ) -> Appointment:
        """
        Book the slot starting at ``start_time`` for the given client.

        The pre-insert lookup only exists to return a friendly conflict before
        touching the constraint; the unique index on start_time decides races.
        """
        if not service or not service.strip():
            raise ValidationError("Service is required.")
        start_time = as_naive_utc(start_time).replace(microsecond=0)

        client = self.clients.resolve_or_create(client_name, client_email, password)
        end_time = start_time + self.business_hours.slot_duration

        if self.repo.get_by_start_time(self.db, start_time):
            logger.info(f"📅 Slot {start_time.isoformat()} already taken")
            raise ConflictError("This time slot was just booked. Please select another time.")

        appointment = self.repo.create_appointment(
            self.db,
            client_id=client.id,
            service=sanitize_string(service),
            start_time=start_time,
            end_time=end_time,
        )
        logger.info(
            f"✅ Appointment {appointment.id} booked for client {client.id} at {start_time.isoformat()}"
        )

        delivered = await self.notifier.booking_confirmed(
            client.email, client.name, appointment.service, appointment.start_time
        )
        if not delivered:
            logger.warning(f"⚠️ Booking {appointment.id} confirmed without confirmation email")
        return appointment
