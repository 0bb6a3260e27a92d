"""
Projects router: public browsing of builder projects.
Admin create/update/delete lives in routers/admin.py.
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.exceptions import NotFoundException
from app.models.project import Project
from app.models.property import Property
from app.schemas.project import ProjectListResponse, ProjectDetailOut, ProjectStatus
from app.schemas.property import PropertySummary

router = APIRouter()


@router.get("", response_model=ProjectListResponse)
def list_projects(
    status: Optional[ProjectStatus] = None,
    city: Optional[str] = Query(default=None, max_length=100),
    is_featured: Optional[bool] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=12, ge=1, le=100),
    db: Session = Depends(get_db),
):
    query = db.query(Project)
    if status:
        query = query.filter(Project.status == status)
    if city:
        query = query.filter(Project.city.ilike(city.strip()))
    if is_featured is not None:
        query = query.filter(Project.is_featured == is_featured)

    total = query.count()
    projects = (
        query.order_by(Project.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "projects": projects}


@router.get("/{project_id}", response_model=ProjectDetailOut)
def get_project(project_id: uuid.UUID, db: Session = Depends(get_db)):
    """Project with its builder and the ACTIVE units, cheapest first."""
    project = (
        db.query(Project)
        .options(joinedload(Project.builder))
        .filter(Project.id == project_id)
        .first()
    )
    if not project:
        raise NotFoundException("Project")

    units = (
        db.query(Property)
        .filter(Property.project_id == project.id, Property.status == "ACTIVE")
        .order_by(Property.price.asc())
        .all()
    )
    out = ProjectDetailOut.model_validate(project)
    out.properties = [PropertySummary.model_validate(p) for p in units]
    return out
