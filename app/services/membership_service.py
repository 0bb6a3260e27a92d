"""
Membership plans and activation.

One Membership row per user: buying or being granted a plan again overwrites
plan, window and status instead of stacking rows.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundException
from app.models.membership import Membership, MembershipPlan, MembershipRequest

logger = logging.getLogger(__name__)


def get_active_plan(db: Session, plan_id: uuid.UUID) -> MembershipPlan:
    plan = (
        db.query(MembershipPlan)
        .filter(MembershipPlan.id == plan_id, MembershipPlan.is_active == True)
        .first()
    )
    if not plan:
        raise NotFoundException("Membership plan")
    return plan


def get_membership(db: Session, user_id: uuid.UUID) -> Optional[Membership]:
    return db.query(Membership).filter(Membership.user_id == user_id).first()


def activate_membership(
    db: Session,
    user_id: uuid.UUID,
    plan: MembershipPlan,
    now: Optional[datetime] = None,
    commit: bool = True,
) -> Membership:
    """Starts (or restarts) the plan now and ends it `plan.duration` days later."""
    now = now or datetime.now(timezone.utc)
    end_date = now + timedelta(days=plan.duration)

    membership = get_membership(db, user_id)
    if membership is None:
        membership = Membership(user_id=user_id)
        db.add(membership)

    membership.plan_id = plan.id
    membership.start_date = now
    membership.end_date = end_date
    membership.status = "ACTIVE"

    if commit:
        db.commit()
        db.refresh(membership)

    logger.info(
        "Membership activated",
        extra={"user_id": str(user_id), "plan_id": str(plan.id), "end_date": end_date.isoformat()},
    )
    return membership


def create_request(
    db: Session,
    user_id: uuid.UUID,
    plan_id: uuid.UUID,
    reason: Optional[str] = None,
) -> MembershipRequest:
    plan = get_active_plan(db, plan_id)
    current = get_membership(db, user_id)

    request = MembershipRequest(
        user_id=user_id,
        plan_id=plan.id,
        current_plan=current.plan.name if current and current.plan else None,
        requested_plan=plan.name,
        reason=reason,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


def review_request(db: Session, request: MembershipRequest, status: str) -> Optional[Membership]:
    """
    APPROVED activates the requested plan for the requester; REJECTED only
    records the decision. Returns the membership when one was activated.
    """
    request.status = status
    membership = None

    if status == "APPROVED":
        plan = db.query(MembershipPlan).filter(MembershipPlan.id == request.plan_id).first()
        if not plan:
            raise NotFoundException("Membership plan")
        membership = activate_membership(db, request.user_id, plan, commit=False)

    db.commit()
    if membership is not None:
        db.refresh(membership)
    db.refresh(request)
    return membership
