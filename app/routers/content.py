"""
Public read endpoints for back-office managed content.
Ads and banners with a date window are only returned inside it.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from app.database import get_db
from app.models.content import Advertisement, Banner, Category, City, FAQ, LoanOffer, SiteSetting, Testimonial
from app.schemas.content import (
    AdOut, AdPosition, BannerOut, BannerPosition, CategoryOut, CityOut, FAQOut, LoanOut, TestimonialOut,
)

router = APIRouter()


def _live(query, model, now: datetime):
    """Active rows whose optional start/end window contains now."""
    return query.filter(
        model.is_active == True,
        or_(model.start_date.is_(None), model.start_date <= now),
        or_(model.end_date.is_(None), model.end_date >= now),
    )


@router.get("/banners", response_model=List[BannerOut])
def list_banners(position: Optional[BannerPosition] = None, db: Session = Depends(get_db)):
    query = _live(db.query(Banner), Banner, datetime.now(timezone.utc))
    if position:
        query = query.filter(Banner.position == position)
    return query.order_by(Banner.order.asc(), Banner.created_at.desc()).all()


@router.get("/ads", response_model=List[AdOut])
def list_ads(position: Optional[AdPosition] = None, db: Session = Depends(get_db)):
    query = _live(db.query(Advertisement), Advertisement, datetime.now(timezone.utc))
    if position:
        query = query.filter(Advertisement.position == position)
    return query.order_by(Advertisement.created_at.desc()).all()


@router.get("/faqs", response_model=List[FAQOut])
def list_faqs(category: Optional[str] = None, db: Session = Depends(get_db)):
    query = db.query(FAQ).filter(FAQ.is_active == True)
    if category:
        query = query.filter(FAQ.category == category)
    return query.order_by(FAQ.order.asc(), FAQ.created_at.asc()).all()


@router.get("/loans", response_model=List[LoanOut])
def list_loans(db: Session = Depends(get_db)):
    return (
        db.query(LoanOffer)
        .filter(LoanOffer.is_active == True)
        .order_by(LoanOffer.interest_rate.asc())
        .all()
    )


@router.get("/testimonials", response_model=List[TestimonialOut])
def list_testimonials(db: Session = Depends(get_db)):
    return (
        db.query(Testimonial)
        .filter(Testimonial.is_active == True)
        .order_by(Testimonial.created_at.desc())
        .all()
    )


@router.get("/cities", response_model=List[CityOut])
def list_cities(popular: Optional[bool] = None, db: Session = Depends(get_db)):
    query = db.query(City).options(selectinload(City.localities))
    if popular is not None:
        query = query.filter(City.is_popular == popular)
    return query.order_by(City.name.asc()).all()


@router.get("/categories", response_model=List[CategoryOut])
def list_categories(db: Session = Depends(get_db)):
    return (
        db.query(Category)
        .filter(Category.is_active == True)
        .order_by(Category.order.asc(), Category.name.asc())
        .all()
    )


@router.get("/settings", response_model=Dict[str, str])
def get_site_settings(db: Session = Depends(get_db)):
    """All site settings as a flat key -> value map."""
    return {s.key: s.value for s in db.query(SiteSetting).all()}
