from .availability import BusinessHours, compute_availability
from .router import router
from .service import BookingLedger

__all__ = ["BookingLedger", "BusinessHours", "compute_availability", "router"]
