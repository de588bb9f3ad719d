"""
Approval workflow.

Membership requests, A-Team applications and profile update requests share
one state machine: PENDING -> APPROVED | REJECTED, both terminal. Approval
side effects run before the status write and the two are not one
transaction, so an interrupted approval may run its side effects again on
the next attempt (the row is still PENDING).
"""

import json
import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ...errors import NotFoundError, ValidationError
from ...models import APPROVED, REJECTED, SOCIAL_LINK_FIELDS
from ...notifications import NotificationDispatcher
from ...security_utils import generate_temporary_password
from ...utils.sanitization import sanitize_string
from ..clients.roles import A_TEAM, MEMBER
from ..clients.service import ClientDirectory
from .repository import PendingRequestRepository
from .schemas import (
    Action,
    MembershipRequestCreate,
    ProfileUpdateRequestCreate,
    RecruitmentApplicationCreate,
    RequestKind,
)

logger = logging.getLogger(__name__)

PROFILE_TEXT_FIELDS = ("bio", "profile_image_url")
PROFILE_FLAG_FIELDS = ("is_profile_public", "is_image_public")


def to_storage_flag(value: Any) -> int:
    """Visibility flags are stored as 0/1"""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int) and value in (0, 1):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "false", "0"):
        return 1 if value.strip().lower() in ("true", "1") else 0
    raise ValidationError(f"Invalid visibility flag value: {value!r}")


def build_profile_patch(changes: dict) -> dict:
    """Column updates for the fields present in ``changes``; everything else is left alone"""
    patch = {}
    for field in PROFILE_TEXT_FIELDS:
        if field in changes:
            patch[field] = changes[field]
    for field in PROFILE_FLAG_FIELDS:
        if field in changes:
            patch[field] = to_storage_flag(changes[field])

    ignored = set(changes) - set(PROFILE_TEXT_FIELDS) - set(PROFILE_FLAG_FIELDS)
    if ignored:
        logger.warning(f"⚠️ Ignoring non-editable profile fields: {sorted(ignored)}")
    return patch


def serialize_request(kind: RequestKind, row) -> dict:
    if kind == RequestKind.MEMBERSHIP:
        details = {"name": row.name, "email": row.email, "message": row.message}
    elif kind == RequestKind.RECRUITMENT:
        details = {
            "name": row.name,
            "email": row.email,
            "resume_url": row.resume_url,
            "photo_id_url": row.photo_id_url,
            "background_check_url": row.background_check_url,
        }
        details.update({field: getattr(row, field) for field in SOCIAL_LINK_FIELDS})
    else:
        details = {
            "client_id": row.client_id,
            "client_name": row.client.name if row.client else None,
            "client_email": row.client.email if row.client else None,
            "requested_changes": json.loads(row.requested_changes),
        }
    return {
        "id": row.id,
        "kind": kind,
        "status": row.status,
        "created_at": row.created_at,
        "reviewed_at": row.reviewed_at,
        "reviewer_id": row.reviewer_id,
        "details": details,
    }


class ApprovalWorkflow:
    """Service layer for pending request submission and review"""

    def __init__(
        self,
        db: Session,
        notifier: NotificationDispatcher,
        clients: Optional[ClientDirectory] = None,
    ):
        self.db = db
        self.notifier = notifier
        self.clients = clients or ClientDirectory(db)
        self.repo = PendingRequestRepository()
        self._approvers = {
            RequestKind.MEMBERSHIP: self._approve_membership,
            RequestKind.RECRUITMENT: self._approve_recruitment,
            RequestKind.PROFILE_UPDATE: self._approve_profile_update,
        }

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    def submit_membership(self, data: MembershipRequestCreate):
        row = self.repo.create_request(
            self.db,
            RequestKind.MEMBERSHIP,
            name=data.name,
            email=data.email,
            message=sanitize_string(data.message) or "",
        )
        logger.info(f"📥 Membership request {row.id} submitted by {data.email}")
        return row

    def submit_recruitment(self, data: RecruitmentApplicationCreate):
        row = self.repo.create_request(
            self.db, RequestKind.RECRUITMENT, **data.model_dump()
        )
        logger.info(f"📥 A-Team application {row.id} submitted by {data.email}")
        return row

    def submit_profile_update(self, data: ProfileUpdateRequestCreate):
        client = self.clients.get_client(data.clientId)
        changes = data.changes.model_dump(exclude_unset=True)
        if not changes:
            raise ValidationError("No profile changes were provided.")
        if "bio" in changes:
            changes["bio"] = sanitize_string(changes["bio"])

        row = self.repo.create_request(
            self.db,
            RequestKind.PROFILE_UPDATE,
            client_id=client.id,
            requested_changes=json.dumps(changes),
        )
        logger.info(f"📥 Profile update request {row.id} submitted for client {client.id}")
        return row

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def list_pending(self, kind: RequestKind) -> list:
        return self.repo.list_pending(self.db, kind)

    async def transition(
        self, kind: RequestKind, request_id: int, action: Action, actor_id: int
    ):
        """
        Approve or reject a pending request.

        Requests that are missing or no longer PENDING raise NotFoundError,
        whatever the action; that filter is what stops double processing.
        """
        try:
            kind = RequestKind(kind)
            action = Action(action)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        row = self.repo.get_pending(self.db, kind, request_id)
        if not row:
            raise NotFoundError("Pending request not found or already handled.")

        if action == Action.APPROVE:
            await self._approvers[kind](row)
            status = APPROVED
        else:
            status = REJECTED

        if not self.repo.mark_reviewed(self.db, row, status, actor_id):
            raise NotFoundError("Pending request not found or already handled.")

        logger.info(f"✅ {kind.value} request {request_id} {status} by reviewer {actor_id}")
        return row

    async def _approve_membership(self, row) -> None:
        client = self.clients.find_by_email(row.email)
        if client:
            self.clients.add_role(client, MEMBER)
            await self.notifier.membership_approved(client.email, client.name)
            return

        password = generate_temporary_password()
        client = self.clients.create_client(row.name, row.email, password, roles=[MEMBER])
        await self.notifier.member_welcome(client.email, client.name, password)

    async def _approve_recruitment(self, row) -> None:
        social_links = {
            field: getattr(row, field) for field in SOCIAL_LINK_FIELDS if getattr(row, field)
        }
        client = self.clients.find_by_email(row.email)
        if client:
            self.clients.add_role(client, A_TEAM, **social_links)
            await self.notifier.a_team_approved(client.email, client.name)
            return

        password = generate_temporary_password()
        client = self.clients.create_client(
            row.name, row.email, password, roles=[A_TEAM], **social_links
        )
        await self.notifier.a_team_welcome(client.email, client.name, password)

    async def _approve_profile_update(self, row) -> None:
        try:
            changes = json.loads(row.requested_changes)
        except (TypeError, ValueError) as e:
            raise ValidationError("Requested changes are malformed.") from e
        if not isinstance(changes, dict):
            raise ValidationError("Requested changes are malformed.")

        client = self.clients.get_client(row.client_id)
        patch = build_profile_patch(changes)
        if patch:
            self.clients.update_profile(client, **patch)
        logger.info(f"👤 Client {client.id} profile updated: {sorted(patch)}")
