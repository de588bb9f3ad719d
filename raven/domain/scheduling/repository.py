"""Appointment repository - Database operations for the shared calendar"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...errors import ConflictError
from ...models import Appointment

logger = logging.getLogger(__name__)


class AppointmentRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def get_by_start_time(db: Session, start_time: datetime) -> Optional[Appointment]:
        return db.query(Appointment).filter(Appointment.start_time == start_time).first()

    @staticmethod
    def get_start_times_between(db: Session, start: datetime, end: datetime) -> list[datetime]:
        """Start times in [start, end)"""
        rows = (
            db.query(Appointment.start_time)
            .filter(Appointment.start_time >= start, Appointment.start_time < end)
            .all()
        )
        return [row.start_time for row in rows]

    @staticmethod
    def get_for_client(db: Session, client_id: int) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.client_id == client_id)
            .order_by(Appointment.start_time.desc())
            .all()
        )

    @staticmethod
    def create_appointment(
        db: Session, client_id: int, service: str, start_time: datetime, end_time: datetime
    ) -> Appointment:
        """Insert an appointment; the unique index on start_time rejects double bookings"""
        appointment = Appointment(
            client_id=client_id,
            service=service,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(appointment)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"⚠️ Appointment insert rejected by unique constraint: {start_time}")
            raise ConflictError(
                "This time slot was just booked. Please select another time."
            ) from e
        db.refresh(appointment)
        return appointment
