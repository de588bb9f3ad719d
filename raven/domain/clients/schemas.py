"""Client domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from .roles import parse_roles


class ClientExistsResponse(BaseModel):
    exists: bool


class ClientResponse(BaseModel):
    """Schema for client response; the password hash is never exposed"""

    id: int
    name: str
    email: str
    roles: list[str]
    referral_code: Optional[str] = None
    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_profile_public: bool = False
    is_image_public: bool = False
    created_at: Optional[datetime] = None

    @classmethod
    def from_client(cls, client) -> "ClientResponse":
        return cls(
            id=client.id,
            name=client.name,
            email=client.email,
            roles=parse_roles(client.role),
            referral_code=client.referral_code,
            bio=client.bio,
            profile_image_url=client.profile_image_url,
            is_profile_public=bool(client.is_profile_public),
            is_image_public=bool(client.is_image_public),
            created_at=client.created_at,
        )
