"""Approval routers - public submissions and admin review endpoints"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...database import get_db
from ...notifications import NotificationDispatcher, get_notifier
from .schemas import (
    MembershipRequestCreate,
    PendingRequestResponse,
    ProfileUpdateRequestCreate,
    RecruitmentApplicationCreate,
    RequestKind,
    SubmissionResponse,
    TransitionRequest,
    TransitionResponse,
)
from .service import ApprovalWorkflow, serialize_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Requests"])
admin_router = APIRouter(prefix="/admin", tags=["Admin"])


def get_approval_workflow(
    db: Session = Depends(get_db),
    notifier: NotificationDispatcher = Depends(get_notifier),
) -> ApprovalWorkflow:
    """Dependency injection for ApprovalWorkflow"""
    return ApprovalWorkflow(db, notifier)


# ============================================================================
# PUBLIC SUBMISSIONS
# ============================================================================


@router.post("/membership-request", response_model=SubmissionResponse)
async def submit_membership_request(
    data: MembershipRequestCreate,
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
):
    row = workflow.submit_membership(data)
    return SubmissionResponse(
        message="Your request to join the Raven community has been submitted for approval!",
        requestId=row.id,
    )


@router.post("/recruitment-application", response_model=SubmissionResponse)
async def submit_recruitment_application(
    data: RecruitmentApplicationCreate,
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
):
    row = workflow.submit_recruitment(data)
    return SubmissionResponse(message="Application submitted successfully!", requestId=row.id)


@router.post("/profile-update-request", response_model=SubmissionResponse)
async def submit_profile_update_request(
    data: ProfileUpdateRequestCreate,
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
):
    row = workflow.submit_profile_update(data)
    return SubmissionResponse(
        message="Your profile changes have been submitted for review.", requestId=row.id
    )


# ============================================================================
# ADMIN REVIEW
# ============================================================================


@admin_router.get("/{kind}/pending", response_model=list[PendingRequestResponse])
async def list_pending_requests(
    kind: RequestKind,
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
):
    """Pending requests of one kind, oldest first"""
    return [
        PendingRequestResponse(**serialize_request(kind, row))
        for row in workflow.list_pending(kind)
    ]


@admin_router.post("/{kind}/{request_id}/transition", response_model=TransitionResponse)
async def transition_request(
    kind: RequestKind,
    request_id: int,
    data: TransitionRequest,
    workflow: ApprovalWorkflow = Depends(get_approval_workflow),
):
    """Approve or reject a pending request"""
    row = await workflow.transition(kind, request_id, data.action, data.adminUserId)
    return TransitionResponse(
        message=f"Request {row.status.lower()}.",
        request=PendingRequestResponse(**serialize_request(kind, row)),
    )
