"""
Slot calendar.

The business runs a single shared calendar of whole-hour slots in UTC. A slot
is open when it lies inside business hours, nobody holds it, and it starts
strictly after "now".
"""

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Iterable

from ...config import BUSINESS_CLOSE_HOUR, BUSINESS_OPEN_HOUR, SLOT_DURATION_MINUTES


@dataclass(frozen=True)
class BusinessHours:
    open_hour: int = 6
    close_hour: int = 22
    slot_duration_minutes: int = 60

    def __post_init__(self):
        if not 0 <= self.open_hour < self.close_hour <= 24:
            raise ValueError(
                f"Invalid business hours: open={self.open_hour} close={self.close_hour}"
            )
        if self.slot_duration_minutes <= 0:
            raise ValueError("Slot duration must be positive")

    @property
    def slot_duration(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)


def get_business_hours() -> BusinessHours:
    """FastAPI dependency for the configured business hours"""
    return BusinessHours(BUSINESS_OPEN_HOUR, BUSINESS_CLOSE_HOUR, SLOT_DURATION_MINUTES)


def format_slot(hour: int) -> str:
    return f"{hour:02d}:00"


def slot_start(day: date, hour: int) -> datetime:
    """Naive UTC start of ``hour`` on ``day``"""
    return datetime.combine(day, time(hour=hour))


def as_naive_utc(moment: datetime) -> datetime:
    if moment.tzinfo is not None:
        return moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start of day, start of next day) in naive UTC"""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


def booked_hours_for(day: date, start_times: Iterable[datetime]) -> set[int]:
    """UTC hour components of the bookings that fall on ``day``"""
    hours = set()
    for start in start_times:
        start = as_naive_utc(start)
        if start.date() == day:
            hours.add(start.hour)
    return hours


def compute_availability(
    day: date,
    business_hours: BusinessHours,
    booked_hours: set[int],
    now: datetime,
) -> list[str]:
    """
    Open slots for ``day`` as ascending "HH:00" strings.

    Hours come from [open_hour, close_hour); any hour in ``booked_hours`` and
    any slot not starting strictly after ``now`` is left out.
    """
    now = as_naive_utc(now)
    return [
        format_slot(hour)
        for hour in range(business_hours.open_hour, business_hours.close_hour)
        if hour not in booked_hours and slot_start(day, hour) > now
    ]
