"""
Admin CRUD for site content: ads, banners, FAQs, loan offers, testimonials,
cities, localities and categories. Public reads are in routers/content.py.

Each resource gets the same four endpoints under /admin:
  GET    /admin/<resource>
  POST   /admin/<resource>
  PUT    /admin/<resource>/{id}     (partial: only sent fields change)
  DELETE /admin/<resource>/{id}

Site settings are a key/value store edited as a whole:
  GET    /admin/settings
  PUT    /admin/settings            (upsert of the sent keys)
"""
import re
import uuid
from typing import Callable, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import get_current_admin
from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.sanitize import sanitize_html
from app.middleware.audit_middleware import log_admin_action
from app.models.content import (
    Advertisement, Banner, Category, City, FAQ, LoanOffer, Locality, SiteSetting, Testimonial,
)
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.content import (
    AdCreateRequest, AdUpdateRequest, AdOut,
    BannerCreateRequest, BannerUpdateRequest, BannerOut,
    FAQCreateRequest, FAQUpdateRequest, FAQOut,
    LoanCreateRequest, LoanUpdateRequest, LoanOut,
    TestimonialCreateRequest, TestimonialUpdateRequest, TestimonialOut,
    CityCreateRequest, CityUpdateRequest, CityOut,
    LocalityCreateRequest, LocalityUpdateRequest, LocalityOut,
    CategoryCreateRequest, CategoryUpdateRequest, CategoryOut,
    SiteSettingOut, SiteSettingsUpdateRequest,
)

router = APIRouter()

# prepare(db, values, existing) may rewrite values in place or raise
Prepare = Callable[[Session, dict, Optional[object]], None]


def register_crud(
    path: str,
    model,
    create_schema,
    update_schema,
    out_schema,
    resource: str,
    label: str,
    order_by,
    prepare: Optional[Prepare] = None,
) -> None:
    action = resource.upper()

    def get_or_404(db: Session, item_id: uuid.UUID):
        item = db.query(model).filter(model.id == item_id).first()
        if not item:
            raise NotFoundException(label)
        return item

    @router.get(path, response_model=List[out_schema], name=f"list_{resource}s")
    def list_items(
        db: Session = Depends(get_db),
        admin: User = Depends(get_current_admin),
    ):
        return db.query(model).order_by(*order_by).all()

    @router.post(path, response_model=out_schema, status_code=201, name=f"create_{resource}")
    def create_item(
        body: create_schema,
        db: Session = Depends(get_db),
        admin: User = Depends(get_current_admin),
    ):
        values = body.model_dump()
        if prepare:
            prepare(db, values, None)
        item = model(**values)
        db.add(item)
        db.commit()
        db.refresh(item)

        log_admin_action(
            db, admin_id=admin.id, action=f"CREATE_{action}",
            target_type=resource, target_id=item.id,
        )
        return item

    @router.put(f"{path}/{{item_id}}", response_model=out_schema, name=f"update_{resource}")
    def update_item(
        item_id: uuid.UUID,
        body: update_schema,
        db: Session = Depends(get_db),
        admin: User = Depends(get_current_admin),
    ):
        item = get_or_404(db, item_id)
        # null only clears nullable columns
        changes = {
            field: value
            for field, value in body.model_dump(exclude_unset=True).items()
            if value is not None or model.__table__.c[field].nullable
        }
        if prepare:
            prepare(db, changes, item)
        for field, value in changes.items():
            setattr(item, field, value)
        db.commit()
        db.refresh(item)

        log_admin_action(
            db, admin_id=admin.id, action=f"UPDATE_{action}",
            target_type=resource, target_id=item.id,
            details={"fields": sorted(changes)},
        )
        return item

    @router.delete(f"{path}/{{item_id}}", response_model=MessageResponse, name=f"delete_{resource}")
    def delete_item(
        item_id: uuid.UUID,
        db: Session = Depends(get_db),
        admin: User = Depends(get_current_admin),
    ):
        item = get_or_404(db, item_id)
        db.delete(item)
        db.commit()

        log_admin_action(
            db, admin_id=admin.id, action=f"DELETE_{action}",
            target_type=resource, target_id=item_id,
        )
        return {"message": f"{label} deleted"}


# ── Hooks ─────────────────────────────────────────────────────────────────────

def prepare_faq(db: Session, values: dict, existing) -> None:
    """Answers are rendered as HTML on the site."""
    if values.get("answer"):
        values["answer"] = sanitize_html(values["answer"])


def prepare_city(db: Session, values: dict, existing) -> None:
    name = values.get("name")
    if not name:
        return
    clash = db.query(City).filter(func.lower(City.name) == name.strip().lower())
    if existing is not None:
        clash = clash.filter(City.id != existing.id)
    if clash.first():
        raise ConflictException(f"City '{name}' already exists")


def prepare_locality(db: Session, values: dict, existing) -> None:
    city_id = values.get("city_id")
    if city_id is not None and not db.query(City).filter(City.id == city_id).first():
        raise NotFoundException("City")


def slugify(name: str) -> str:
    """Lower-cased, non-alphanumeric runs collapsed to hyphens: Luxury Villas -> luxury-villas."""
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


def prepare_category(db: Session, values: dict, existing) -> None:
    name = values.get("name")
    if name:
        values["name"] = name.strip()
        slug = slugify(name)
        if not slug:
            raise BadRequestException("Category name must contain letters or digits")
        clash = db.query(Category).filter(Category.slug == slug)
        if existing is not None:
            clash = clash.filter(Category.id != existing.id)
        if clash.first():
            raise ConflictException(f"Category '{name}' already exists")
        values["slug"] = slug

    parent_id = values.get("parent_id")
    if parent_id is not None:
        if existing is not None and parent_id == existing.id:
            raise BadRequestException("A category cannot be its own parent")
        if not db.query(Category).filter(Category.id == parent_id).first():
            raise NotFoundException("Parent category")


# ── Registrations ─────────────────────────────────────────────────────────────

register_crud(
    "/ads", Advertisement, AdCreateRequest, AdUpdateRequest, AdOut,
    resource="ad", label="Advertisement",
    order_by=(Advertisement.created_at.desc(),),
)
register_crud(
    "/banners", Banner, BannerCreateRequest, BannerUpdateRequest, BannerOut,
    resource="banner", label="Banner",
    order_by=(Banner.position.asc(), Banner.order.asc()),
)
register_crud(
    "/faqs", FAQ, FAQCreateRequest, FAQUpdateRequest, FAQOut,
    resource="faq", label="FAQ",
    order_by=(FAQ.order.asc(), FAQ.created_at.asc()),
    prepare=prepare_faq,
)
register_crud(
    "/loans", LoanOffer, LoanCreateRequest, LoanUpdateRequest, LoanOut,
    resource="loan", label="Loan offer",
    order_by=(LoanOffer.interest_rate.asc(),),
)
register_crud(
    "/testimonials", Testimonial, TestimonialCreateRequest, TestimonialUpdateRequest, TestimonialOut,
    resource="testimonial", label="Testimonial",
    order_by=(Testimonial.created_at.desc(),),
)
register_crud(
    "/cities", City, CityCreateRequest, CityUpdateRequest, CityOut,
    resource="city", label="City",
    order_by=(City.name.asc(),),
    prepare=prepare_city,
)
register_crud(
    "/localities", Locality, LocalityCreateRequest, LocalityUpdateRequest, LocalityOut,
    resource="locality", label="Locality",
    order_by=(Locality.name.asc(),),
    prepare=prepare_locality,
)
register_crud(
    "/categories", Category, CategoryCreateRequest, CategoryUpdateRequest, CategoryOut,
    resource="category", label="Category",
    order_by=(Category.order.asc(), Category.name.asc()),
    prepare=prepare_category,
)


# ── Site settings ─────────────────────────────────────────────────────────────

@router.get("/settings", response_model=List[SiteSettingOut])
def list_settings(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return db.query(SiteSetting).order_by(SiteSetting.key.asc()).all()


@router.put("/settings", response_model=List[SiteSettingOut])
def update_settings(
    body: SiteSettingsUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    existing = {
        s.key: s
        for s in db.query(SiteSetting).filter(SiteSetting.key.in_(list(body.settings))).all()
    }
    for key, value in body.settings.items():
        if key in existing:
            existing[key].value = value
        else:
            db.add(SiteSetting(key=key, value=value))
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_SETTINGS",
        target_type="settings", details={"keys": sorted(body.settings)},
    )
    return db.query(SiteSetting).order_by(SiteSetting.key.asc()).all()
