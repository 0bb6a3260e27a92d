"""
Memberships router: public plan catalogue, the caller's membership and
upgrade requests. Paid activation goes through routers/payments.py;
request review and plan CRUD live in routers/admin.py.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user
from app.models.membership import Membership, MembershipPlan
from app.models.user import User
from app.schemas.membership import (
    PlanOut, MembershipOut, MembershipRequestCreate, MembershipRequestOut,
)
from app.services import membership_service

router = APIRouter()


@router.get("/plans", response_model=List[PlanOut])
def list_plans(db: Session = Depends(get_db)):
    """Active plans, cheapest first."""
    return (
        db.query(MembershipPlan)
        .filter(MembershipPlan.is_active == True)
        .order_by(MembershipPlan.price.asc())
        .all()
    )


@router.get("/me", response_model=Optional[MembershipOut])
def my_membership(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The caller's membership with its plan, or null when they never had one."""
    return (
        db.query(Membership)
        .options(joinedload(Membership.plan))
        .filter(Membership.user_id == current_user.id)
        .first()
    )


@router.post("/requests", response_model=MembershipRequestOut, status_code=201)
def request_membership(
    body: MembershipRequestCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return membership_service.create_request(db, current_user.id, body.plan_id, body.reason)
