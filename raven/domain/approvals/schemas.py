"""Approval domain schemas - request kinds, submissions and admin actions"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.validators import validate_email, validate_url


class RequestKind(str, Enum):
    MEMBERSHIP = "membership"
    RECRUITMENT = "recruitment"
    PROFILE_UPDATE = "profile-update"


class Action(str, Enum):
    APPROVE = "APPROVE"
    REJECT = "REJECT"


class ApplicantBase(BaseModel):
    name: str
    email: str

    @field_validator("name")
    @classmethod
    def require_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if not v:
            raise ValueError("Email is required")
        return validate_email(v)


class MembershipRequestCreate(ApplicantBase):
    """Schema for a request to join the community"""

    message: Optional[str] = None


class RecruitmentApplicationCreate(ApplicantBase):
    """Schema for an A-Team application"""

    resume_url: str
    photo_id_url: str
    background_check_url: str
    facebook_url: Optional[str] = None
    instagram_url: Optional[str] = None
    tiktok_url: Optional[str] = None
    youtube_url: Optional[str] = None
    twitter_url: Optional[str] = None

    @field_validator("resume_url", "photo_id_url", "background_check_url")
    @classmethod
    def require_attachment(cls, v):
        url = validate_url(v)
        if not url:
            raise ValueError("Attachment URL is required")
        return url

    @field_validator("facebook_url", "instagram_url", "tiktok_url", "youtube_url", "twitter_url")
    @classmethod
    def check_social(cls, v):
        return validate_url(v)


class ProfileChanges(BaseModel):
    """Editable profile fields; only the fields sent are applied on approval"""

    model_config = ConfigDict(extra="forbid")

    bio: Optional[str] = None
    profile_image_url: Optional[str] = None
    is_profile_public: Optional[bool] = None
    is_image_public: Optional[bool] = None

    @field_validator("profile_image_url")
    @classmethod
    def check_image_url(cls, v):
        return validate_url(v)

    @field_validator("is_profile_public", "is_image_public")
    @classmethod
    def require_flag_value(cls, v):
        # Omit a flag to leave it unchanged
        if v is None:
            raise ValueError("Visibility flag must be true or false")
        return v


class ProfileUpdateRequestCreate(BaseModel):
    clientId: int
    changes: ProfileChanges


class SubmissionResponse(BaseModel):
    message: str
    requestId: int


class TransitionRequest(BaseModel):
    action: Action
    adminUserId: int


class PendingRequestResponse(BaseModel):
    id: int
    kind: RequestKind
    status: str
    created_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewer_id: Optional[int] = None
    details: dict[str, Any]


class TransitionResponse(BaseModel):
    message: str
    request: PendingRequestResponse
