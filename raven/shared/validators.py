"""Shared validation utilities"""

import re
from datetime import date, datetime, timezone
from typing import Optional

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
URL_PATTERN = re.compile(r"^https?://[^\s/$.?#].[^\s]*$", re.IGNORECASE)


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Surrounding whitespace is stripped but case is preserved: clients are
    looked up by exact email match.

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip()
    if not EMAIL_PATTERN.match(email):
        raise ValueError("Invalid email format")
    return email


def validate_url(url: Optional[str]) -> Optional[str]:
    """Validate an http(s) URL; empty values pass through as None"""
    if url is None:
        return None
    url = url.strip()
    if not url:
        return None
    if not URL_PATTERN.match(url):
        raise ValueError("Invalid URL format")
    return url


def parse_iso_date(value: str) -> date:
    """Parse a YYYY-MM-DD date string"""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError) as e:
        raise ValueError("Date must be in YYYY-MM-DD format") from e


def parse_utc_datetime(value: str) -> datetime:
    """
    Parse an ISO-8601 instant into a naive UTC datetime at second precision.

    A trailing "Z" is accepted and naive values are taken as UTC.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Datetime is required")
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise ValueError("Datetime must be ISO-8601, e.g. 2025-06-10T09:00:00Z") from e

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed.replace(microsecond=0)
