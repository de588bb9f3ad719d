"""Scheduling router - availability and booking endpoints"""

import logging

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import ValidationError
from ...notifications import NotificationDispatcher, get_notifier
from ...shared.validators import parse_iso_date, parse_utc_datetime
from .availability import BusinessHours, get_business_hours
from .schemas import AppointmentResponse, BookingRequest, BookingResponse
from .service import BookingLedger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Scheduling"])


def get_booking_ledger(
    db: Session = Depends(get_db),
    business_hours: BusinessHours = Depends(get_business_hours),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> BookingLedger:
    """Dependency injection for BookingLedger"""
    return BookingLedger(db, business_hours, notifier)


@router.get("/availability", response_model=list[str])
async def get_availability(
    date: str = Query(..., description="YYYY-MM-DD"),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Open slots for a date as HH:00 strings"""
    try:
        day = parse_iso_date(date)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return ledger.available_slots(day)


@router.post("/book-appointment", response_model=BookingResponse)
async def book_appointment(
    data: BookingRequest,
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """Book a slot, creating the client on first contact"""
    try:
        start_time = parse_utc_datetime(data.appointmentTime)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    appointment = await ledger.book_slot(
        data.clientName, data.clientEmail, data.service, start_time, data.password
    )
    when = appointment.start_time.strftime("%a %b %d %Y at %H:%M UTC")
    return BookingResponse(
        message=f"Appointment confirmed for {data.clientName} on {when}.",
        appointment=AppointmentResponse.model_validate(appointment),
    )


@router.get("/appointments", response_model=list[AppointmentResponse])
async def get_client_appointments(
    clientId: int = Query(...),
    ledger: BookingLedger = Depends(get_booking_ledger),
):
    """A client's appointments, most recent first"""
    return [AppointmentResponse.model_validate(a) for a in ledger.client_appointments(clientId)]
