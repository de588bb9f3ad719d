"""Pending request repository - one code path for all three request tables"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from ...models import (
    PENDING,
    MembershipRequest,
    ProfileUpdateRequest,
    RecruitmentApplication,
)
from .schemas import RequestKind

REQUEST_MODELS = {
    RequestKind.MEMBERSHIP: MembershipRequest,
    RequestKind.RECRUITMENT: RecruitmentApplication,
    RequestKind.PROFILE_UPDATE: ProfileUpdateRequest,
}


class PendingRequestRepository:
    """Repository for membership, recruitment and profile update requests"""

    @staticmethod
    def create_request(db: Session, kind: RequestKind, **fields):
        row = REQUEST_MODELS[kind](status=PENDING, **fields)
        db.add(row)
        db.commit()
        db.refresh(row)
        return row

    @staticmethod
    def get_pending(db: Session, kind: RequestKind, request_id: int) -> Optional[object]:
        """Only PENDING rows match; handled requests look absent"""
        model = REQUEST_MODELS[kind]
        return (
            db.query(model)
            .filter(model.id == request_id, model.status == PENDING)
            .first()
        )

    @staticmethod
    def list_pending(db: Session, kind: RequestKind) -> list:
        model = REQUEST_MODELS[kind]
        return (
            db.query(model)
            .filter(model.status == PENDING)
            .order_by(model.created_at.asc(), model.id.asc())
            .all()
        )

    @staticmethod
    def mark_reviewed(db: Session, row, status: str, reviewer_id: int) -> bool:
        """
        Move a PENDING row to ``status``.

        The update is conditional on the row still being PENDING, so a
        concurrent reviewer that got there first makes this return False.
        """
        model = type(row)
        updated = (
            db.query(model)
            .filter(model.id == row.id, model.status == PENDING)
            .update(
                {
                    model.status: status,
                    model.reviewer_id: reviewer_id,
                    model.reviewed_at: datetime.now(timezone.utc).replace(tzinfo=None),
                },
                synchronize_session=False,
            )
        )
        db.commit()
        if not updated:
            return False
        db.refresh(row)
        return True
