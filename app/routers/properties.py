"""
Properties router: public search and detail, owner create/update/delete.

Endpoints:
  GET    /properties        → ACTIVE listings, filtered + paginated
  POST   /properties        → create listing (starts PENDING)
  GET    /properties/{id}   → detail with owner, counts a view
  PUT    /properties/{id}   → owner/admin partial update
  DELETE /properties/{id}   → owner/admin delete
"""
import uuid
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.rate_limiter import rate_limit
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.property import (
    PropertyCreateRequest, PropertyUpdateRequest, PropertyOut, PropertyDetailOut,
    PropertyListResponse, ListingType, SortBy,
)
from app.services import property_service
from app.services.property_service import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE

router = APIRouter()


@router.get("", response_model=PropertyListResponse)
def list_properties(
    location: Optional[str] = Query(default=None, max_length=100),
    listing_type: Optional[ListingType] = None,
    property_type: Optional[str] = None,
    bedrooms: Optional[str] = None,
    min_price: Optional[float] = Query(default=None, ge=0),
    max_price: Optional[float] = Query(default=None, ge=0),
    sort_by: SortBy = "newest",
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
):
    properties, pagination = property_service.search_properties(
        db,
        location=location,
        listing_type=listing_type,
        property_type=property_type,
        bedrooms=bedrooms,
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return {"properties": properties, "pagination": pagination}


@router.post(
    "",
    response_model=PropertyOut,
    status_code=201,
    dependencies=[Depends(rate_limit("api"))],
)
def create_property(
    body: PropertyCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """New listings are PENDING until an admin approves them."""
    return property_service.create_property(db, current_user, body)


@router.get("/{property_id}", response_model=PropertyDetailOut)
def get_property(property_id: uuid.UUID, db: Session = Depends(get_db)):
    return property_service.view_property(db, property_id)


@router.put("/{property_id}", response_model=PropertyOut)
def update_property(
    property_id: uuid.UUID,
    body: PropertyUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prop = property_service.get_property_or_404(db, property_id)
    return property_service.update_property(db, prop, current_user, body)


@router.delete("/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prop = property_service.get_property_or_404(db, property_id)
    property_service.delete_property(db, prop, current_user)
    return {"message": "Property deleted successfully"}
