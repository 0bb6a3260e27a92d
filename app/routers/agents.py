"""
Agents directory: public list/detail and the agent's own profile edit.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import ForbiddenException, NotFoundException
from app.models.property import Property
from app.models.user import AgentProfile, User
from app.schemas.project import (
    AgentOut, AgentDetailOut, AgentListResponse, AgentProfileUpdateRequest,
)
from app.schemas.property import PropertySummary

router = APIRouter()


@router.get("", response_model=AgentListResponse)
def list_agents(
    city: Optional[str] = Query(default=None, max_length=100),
    featured: Optional[bool] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = (
        db.query(AgentProfile)
        .join(User, AgentProfile.user_id == User.id)
        .filter(User.is_active.is_(True))
    )
    if city:
        query = query.filter(AgentProfile.city.ilike(city.strip()))
    if featured is not None:
        query = query.filter(AgentProfile.is_featured.is_(featured))

    total = query.count()
    agents = (
        query.options(joinedload(AgentProfile.user))
        .order_by(AgentProfile.rating.desc(), AgentProfile.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "agents": agents}


@router.put("/me", response_model=AgentOut)
def update_my_agent_profile(
    body: AgentProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = current_user.agent_profile
    if current_user.user_type != "AGENT" or profile is None:
        raise ForbiddenException("Only agents have an agent profile")

    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/{agent_id}", response_model=AgentDetailOut)
def get_agent(agent_id: uuid.UUID, db: Session = Depends(get_db)):
    """Agent profile with the 10 newest ACTIVE listings."""
    agent = (
        db.query(AgentProfile)
        .options(joinedload(AgentProfile.user))
        .filter(AgentProfile.id == agent_id)
        .first()
    )
    if not agent:
        raise NotFoundException("Agent")

    listings = (
        db.query(Property)
        .filter(Property.user_id == agent.user_id, Property.status == "ACTIVE")
        .order_by(Property.created_at.desc())
        .limit(10)
        .all()
    )
    out = AgentDetailOut.model_validate(agent)
    out.properties = [PropertySummary.model_validate(p) for p in listings]
    return out
