"""
Password hashing and token generation shared by the client directory and the
approval workflow.
"""

import logging
import secrets
import string
import time
from typing import Optional

from passlib.context import CryptContext

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BASE36_ALPHABET = string.digits + string.ascii_lowercase
REFERRAL_PREFIX = "REF-"


def hash_password(password: str) -> str:
    """Hash password using bcrypt"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against bcrypt hash"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.error(f"Password verification error: {e}")
        return False


def generate_secure_token(length: int = 32) -> str:
    """Generate a cryptographically secure random token"""
    return secrets.token_urlsafe(length)


def generate_temporary_password() -> str:
    """Credential handed to newly approved members; stored only as a hash"""
    return generate_secure_token(12)


def generate_referral_code(now_ms: Optional[int] = None) -> str:
    """REF-<epoch millis><4 random base36 chars>"""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    suffix = "".join(secrets.choice(BASE36_ALPHABET) for _ in range(4))
    return f"{REFERRAL_PREFIX}{now_ms}{suffix}"
