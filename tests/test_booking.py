from datetime import datetime, timedelta, timezone

import pytest

from raven.domain.scheduling.repository import AppointmentRepository
from raven.domain.scheduling.service import BookingLedger
from raven.errors import ConflictError, NotFoundError, ValidationError
from raven.models import Appointment, Client
from raven.notifications import NotificationDispatcher
from tests.conftest import RecordingSender

NOW = datetime(2025, 6, 1, 12, 0)
SLOT = datetime(2025, 6, 10, 9, 0)


@pytest.fixture
def ledger(db, business_hours, notifier):
    return BookingLedger(db, business_hours, notifier)


def booking_payload(**overrides):
    payload = {
        "clientName": "Ada Lovelace",
        "clientEmail": "ada@example.com",
        "service": "Haircut",
        "appointmentTime": "2099-06-10T09:00:00Z",
    }
    payload.update(overrides)
    return payload


async def test_book_slot_creates_client_and_appointment(ledger, db, sender):
    appointment = await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)

    assert appointment.start_time == SLOT
    assert appointment.end_time == SLOT + timedelta(minutes=60)
    assert appointment.service == "Haircut"
    client = db.query(Client).filter(Client.id == appointment.client_id).one()
    assert client.email == "ada@example.com"
    assert sender.subjects_for("ada@example.com") == ["Appointment Confirmed"]


async def test_second_booking_of_same_instant_conflicts(ledger, db):
    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)

    with pytest.raises(ConflictError):
        await ledger.book_slot("Grace", "grace@example.com", "Beard trim", SLOT)

    assert db.query(Appointment).count() == 1


async def test_unique_constraint_rejects_when_fast_path_misses(ledger, db, monkeypatch):
    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)

    # Concurrent booker passed the lookup before the first insert landed
    monkeypatch.setattr(
        AppointmentRepository, "get_by_start_time", staticmethod(lambda db, start_time: None)
    )

    with pytest.raises(ConflictError):
        await ledger.book_slot("Grace", "grace@example.com", "Haircut", SLOT)

    assert db.query(Appointment).count() == 1


async def test_same_client_can_book_different_slots(ledger, db):
    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)
    await ledger.book_slot("Ada", "ada@example.com", "Colour", SLOT + timedelta(hours=1))

    assert db.query(Client).count() == 1
    assert db.query(Appointment).count() == 2


async def test_aware_start_time_is_stored_as_utc(ledger):
    eastern = timezone(timedelta(hours=-4))
    appointment = await ledger.book_slot(
        "Ada", "ada@example.com", "Haircut", datetime(2025, 6, 10, 5, 0, tzinfo=eastern)
    )

    assert appointment.start_time == SLOT


@pytest.mark.parametrize(
    "start_time",
    [
        datetime(2025, 6, 10, 9, 30),
        datetime(2025, 6, 10, 23, 0),
        datetime(2020, 1, 1, 9, 0),
    ],
)
async def test_any_instant_books_once_then_conflicts(ledger, db, start_time):
    appointment = await ledger.book_slot("Ada", "ada@example.com", "Haircut", start_time)
    assert appointment.start_time == start_time

    with pytest.raises(ConflictError):
        await ledger.book_slot("Grace", "grace@example.com", "Haircut", start_time)

    assert db.query(Appointment).count() == 1


async def test_blank_service_rejected_without_side_effects(ledger, db):
    with pytest.raises(ValidationError):
        await ledger.book_slot("Ada", "ada@example.com", "  ", SLOT)

    assert db.query(Client).count() == 0
    assert db.query(Appointment).count() == 0


async def test_notification_failure_does_not_fail_booking(db, business_hours):
    failing = NotificationDispatcher(sender=RecordingSender(fail=True), owner_email=None)
    ledger = BookingLedger(db, business_hours, failing)

    appointment = await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)

    assert appointment.id is not None
    assert db.query(Appointment).count() == 1


async def test_owner_gets_a_copy_when_configured(db, business_hours, sender):
    notifier = NotificationDispatcher(sender=sender, owner_email="owner@raven.test")
    ledger = BookingLedger(db, business_hours, notifier)

    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)

    assert sender.subjects_for("ada@example.com") == ["Appointment Confirmed"]
    assert len(sender.subjects_for("owner@raven.test")) == 1


async def test_available_slots_excludes_booked_hours(ledger):
    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT)
    await ledger.book_slot("Ada", "ada@example.com", "Haircut", SLOT.replace(hour=21))

    slots = ledger.available_slots(SLOT.date(), now=NOW)

    assert "09:00" not in slots
    assert "21:00" not in slots
    assert len(slots) == 14


def test_client_appointments_for_unknown_client(ledger):
    with pytest.raises(NotFoundError):
        ledger.client_appointments(42)


# ----------------------------------------------------------------------------
# HTTP
# ----------------------------------------------------------------------------


def test_book_endpoint_then_conflict(api):
    first = api.post("/api/book-appointment", json=booking_payload())
    assert first.status_code == 200
    assert first.json()["appointment"]["service"] == "Haircut"

    second = api.post("/api/book-appointment", json=booking_payload(clientEmail="grace@example.com"))
    assert second.status_code == 409
    assert second.json() == {
        "error": "conflict",
        "message": "This time slot was just booked. Please select another time.",
    }


def test_book_endpoint_missing_fields(api):
    response = api.post("/api/book-appointment", json={"clientName": "Ada"})

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation_error"
    assert {field["field"] for field in body["fields"]} >= {"clientEmail", "service", "appointmentTime"}


def test_book_endpoint_bad_time(api):
    response = api.post("/api/book-appointment", json=booking_payload(appointmentTime="tomorrow"))

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_availability_endpoint(api):
    assert len(api.get("/api/availability", params={"date": "2099-06-10"}).json()) == 16

    api.post("/api/book-appointment", json=booking_payload())

    slots = api.get("/api/availability", params={"date": "2099-06-10"}).json()
    assert len(slots) == 15
    assert "09:00" not in slots


def test_availability_endpoint_validates_date(api):
    assert api.get("/api/availability", params={"date": "10/06/2099"}).status_code == 400
    assert api.get("/api/availability").status_code == 400


def test_client_appointments_endpoint(api):
    booked = api.post("/api/book-appointment", json=booking_payload()).json()
    api.post(
        "/api/book-appointment",
        json=booking_payload(appointmentTime="2099-06-11T10:00:00Z", service="Colour"),
    )

    client_id = booked["appointment"]["client_id"]
    appointments = api.get("/api/appointments", params={"clientId": client_id}).json()

    assert [a["service"] for a in appointments] == ["Colour", "Haircut"]


def test_booking_a_past_slot_then_conflict(api):
    body = {
        "clientName": "Jane",
        "clientEmail": "jane@example.com",
        "service": "Massage",
        "appointmentTime": "2025-06-10T09:00:00Z",
    }

    first = api.post("/api/book-appointment", json=body)
    assert first.status_code == 200
    assert first.json()["appointment"]["start_time"].startswith("2025-06-10T09:00:00")

    second = api.post("/api/book-appointment", json=body)
    assert second.status_code == 409
    assert second.json()["error"] == "conflict"
