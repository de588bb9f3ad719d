"""Scheduling domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from ...shared.validators import validate_email


class BookingRequest(BaseModel):
    """Schema for booking an appointment"""

    clientName: str
    clientEmail: str
    service: str
    appointmentTime: str
    password: Optional[str] = None

    @field_validator("clientName", "service")
    @classmethod
    def require_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Field is required")
        return v.strip()

    @field_validator("clientEmail")
    @classmethod
    def check_email(cls, v):
        if not v or not v.strip():
            raise ValueError("Email is required")
        return validate_email(v)


class AppointmentResponse(BaseModel):
    """Schema for appointment response"""

    id: int
    client_id: int
    service: str
    start_time: datetime
    end_time: datetime

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    message: str
    appointment: AppointmentResponse
