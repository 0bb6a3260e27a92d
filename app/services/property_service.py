"""
Property service: public search, listing lifecycle and ownership checks.

Listings created by users always start PENDING; only admin approval
(routers/admin.py) moves them to ACTIVE, and only ACTIVE listings are searchable.
"""
import logging
import math
import uuid
from typing import Optional, get_args

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import BadRequestException, ForbiddenException, NotFoundException
from app.core.sanitize import sanitize_html
from app.models.project import Project
from app.models.property import Property
from app.models.user import User
from app.schemas.property import PropertyCreateRequest, PropertyType, PropertyUpdateRequest

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 12
MAX_PAGE_SIZE = 100

SORT_ORDERS = {
    "newest": (Property.created_at.desc(),),
    "price_asc": (Property.price.asc(),),
    "price_desc": (Property.price.desc(),),
    "popular": (Property.views.desc(),),
}

# Filter values the search UI sends for "no filter"
ANY_PROPERTY_TYPE = "all types"
ANY_BEDROOMS = "any"
PROPERTY_TYPES = get_args(PropertyType)


def parse_bedrooms(value: Optional[str]) -> tuple[Optional[str], Optional[int]]:
    """
    Turns the bedrooms filter into (operator, count).
    "Any"/empty → (None, None); "5+" → (">=", 5); "3" → ("==", 3).
    """
    if value is None:
        return None, None
    value = value.strip()
    if not value or value.lower() == ANY_BEDROOMS:
        return None, None
    try:
        if value.endswith("+"):
            return ">=", int(value[:-1])
        return "==", int(value)
    except ValueError:
        raise BadRequestException("bedrooms must be a number, 'N+' or 'Any'")


def parse_property_type(value: Optional[str]) -> Optional[str]:
    """Maps "All Types"/empty to None, anything else to the upper-cased enum value."""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() == ANY_PROPERTY_TYPE:
        return None
    normalized = value.upper().replace(" ", "_")
    if normalized not in PROPERTY_TYPES:
        raise BadRequestException(f"property_type must be one of: {', '.join(PROPERTY_TYPES)} or 'All Types'")
    return normalized


def search_properties(
    db: Session,
    location: Optional[str] = None,
    listing_type: Optional[str] = None,
    property_type: Optional[str] = None,
    bedrooms: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    sort_by: str = "newest",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> tuple[list[Property], dict]:
    """Returns (page of ACTIVE listings, pagination dict)."""
    query = db.query(Property).filter(Property.status == "ACTIVE")

    if listing_type:
        query = query.filter(Property.listing_type == listing_type.upper())

    property_type = parse_property_type(property_type)
    if property_type:
        query = query.filter(Property.property_type == property_type)

    op, count = parse_bedrooms(bedrooms)
    if op == ">=":
        query = query.filter(Property.bedrooms >= count)
    elif op == "==":
        query = query.filter(Property.bedrooms == count)

    if min_price is not None:
        query = query.filter(Property.price >= min_price)
    if max_price is not None:
        query = query.filter(Property.price <= max_price)

    if location and location.strip():
        term = location.strip().lower()
        query = query.filter(
            or_(
                func.lower(Property.city).contains(term, autoescape=True),
                func.lower(Property.locality).contains(term, autoescape=True),
                func.lower(Property.state).contains(term, autoescape=True),
            )
        )

    total = query.count()
    properties = (
        query.options(joinedload(Property.owner))
        .order_by(*SORT_ORDERS.get(sort_by, SORT_ORDERS["newest"]))
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
    return properties, pagination


def get_property_or_404(db: Session, property_id: uuid.UUID) -> Property:
    prop = db.query(Property).filter(Property.id == property_id).first()
    if not prop:
        raise NotFoundException("Property")
    return prop


def view_property(db: Session, property_id: uuid.UUID) -> Property:
    """Loads a listing with its owner and counts the view."""
    # Single UPDATE so concurrent views are not lost
    updated = (
        db.query(Property)
        .filter(Property.id == property_id)
        .update({Property.views: Property.views + 1}, synchronize_session=False)
    )
    if not updated:
        raise NotFoundException("Property")
    db.commit()

    return (
        db.query(Property)
        .options(joinedload(Property.owner))
        .populate_existing()
        .filter(Property.id == property_id)
        .first()
    )


def _check_project(db: Session, project_id: Optional[uuid.UUID]) -> None:
    if project_id is not None and not db.query(Project).filter(Project.id == project_id).first():
        raise NotFoundException("Project")


def create_property(db: Session, owner: User, data: PropertyCreateRequest) -> Property:
    values = data.model_dump()
    _check_project(db, values.get("project_id"))
    if values.get("description"):
        values["description"] = sanitize_html(values["description"])

    prop = Property(**values, user_id=owner.id, status="PENDING", listing_tier="BASIC", views=0)
    db.add(prop)
    db.commit()
    db.refresh(prop)
    logger.info("Property created", extra={"property_id": str(prop.id), "user_id": str(owner.id)})
    return prop


def ensure_can_modify(prop: Property, user: User) -> None:
    if prop.user_id != user.id and not user.is_admin:
        raise ForbiddenException("You can only modify your own listings")


def update_property(db: Session, prop: Property, user: User, data: PropertyUpdateRequest) -> Property:
    """Partial update. Status and tier are not part of the owner-editable schema."""
    ensure_can_modify(prop, user)
    updates = data.model_dump(exclude_unset=True)

    for required in ("title", "property_type", "listing_type", "address", "locality", "city", "state", "price"):
        if required in updates and updates[required] is None:
            raise BadRequestException(f"{required} cannot be empty")

    if "project_id" in updates:
        _check_project(db, updates["project_id"])
    if updates.get("description"):
        updates["description"] = sanitize_html(updates["description"])

    for field, value in updates.items():
        setattr(prop, field, value)
    db.commit()
    db.refresh(prop)
    return prop


def delete_property(db: Session, prop: Property, user: User) -> None:
    ensure_can_modify(prop, user)
    property_id = str(prop.id)
    db.delete(prop)
    db.commit()
    logger.info("Property deleted", extra={"property_id": property_id, "user_id": str(user.id)})
