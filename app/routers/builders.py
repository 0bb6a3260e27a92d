"""
Builders directory: public list/detail and the builder's own company profile.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import ForbiddenException, NotFoundException
from app.models.project import Project
from app.models.user import BuilderProfile, User
from app.schemas.project import (
    BuilderOut, BuilderDetailOut, BuilderListResponse, BuilderProfileUpdateRequest, ProjectOut,
)

router = APIRouter()


@router.get("", response_model=BuilderListResponse)
def list_builders(
    city: Optional[str] = Query(default=None, max_length=100),
    featured: Optional[bool] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = (
        db.query(BuilderProfile)
        .join(User, BuilderProfile.user_id == User.id)
        .filter(User.is_active.is_(True))
    )
    if city:
        query = query.filter(BuilderProfile.city.ilike(city.strip()))
    if featured is not None:
        query = query.filter(BuilderProfile.is_featured.is_(featured))

    total = query.count()
    builders = (
        query.options(joinedload(BuilderProfile.user))
        .order_by(BuilderProfile.company_name.asc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "builders": builders}


@router.put("/me", response_model=BuilderOut)
def update_my_builder_profile(
    body: BuilderProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = current_user.builder_profile
    if current_user.user_type != "BUILDER" or profile is None:
        raise ForbiddenException("Only builders have a company profile")

    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "company_name" and value is None:
            continue
        setattr(profile, field, value)
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/{builder_id}", response_model=BuilderDetailOut)
def get_builder(builder_id: uuid.UUID, db: Session = Depends(get_db)):
    builder = (
        db.query(BuilderProfile)
        .options(joinedload(BuilderProfile.user))
        .filter(BuilderProfile.id == builder_id)
        .first()
    )
    if not builder:
        raise NotFoundException("Builder")

    projects = (
        db.query(Project)
        .filter(Project.builder_id == builder.id)
        .order_by(Project.created_at.desc())
        .all()
    )
    out = BuilderDetailOut.model_validate(builder)
    out.projects = [ProjectOut.model_validate(p) for p in projects]
    return out
