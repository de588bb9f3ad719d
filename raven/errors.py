"""
Error taxonomy shared by every domain service.

Services raise these; ``raven.main`` turns them into structured JSON bodies
of the form ``{"error": <kind>, "message": <text>}``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal_error"


class RavenError(Exception):
    """Base class for errors that map to a client-visible response"""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = 500
    default_message = "An unexpected error occurred."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "message": self.message}


class ValidationError(RavenError):
    kind = ErrorKind.VALIDATION
    status_code = 400
    default_message = "Missing or invalid fields."


class NotFoundError(RavenError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found."


class ConflictError(RavenError):
    kind = ErrorKind.CONFLICT
    status_code = 409
    default_message = "The request conflicts with existing data."


class InternalError(RavenError):
    kind = ErrorKind.INTERNAL
    status_code = 500
    default_message = "An internal error occurred."
