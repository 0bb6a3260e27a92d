"""
Users router: profile management, avatar upload and the owner dashboard.

Endpoints:
  GET  /users/me             → current user's full profile
  PUT  /users/me             → update name, phone, avatar_url
  POST /users/me/avatar      → upload avatar to Cloudinary
  PUT  /users/me/password    → change password (current password required)
  GET  /users/me/properties  → own listings in every status
  GET  /users/dashboard      → listing stats, recent activity
"""
from datetime import datetime, timedelta, timezone
from typing import List

from fastapi import APIRouter, Depends, UploadFile, File
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.rate_limiter import rate_limit
from app.models.inquiry import Inquiry
from app.models.notification import Notification
from app.models.property import Favorite, Property
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.property import PropertyOut
from app.schemas.user import (
    UserOut, UserUpdateRequest, AvatarUploadResponse, ChangePasswordRequest, DashboardResponse,
)
from app.services import auth_service
from app.services.cloudinary_service import upload_avatar, read_image, AVATAR_CONTENT_TYPES

router = APIRouter()


@router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user's full profile.
    get_current_user already fetched the user.
    """
    return current_user


@router.put("/me", response_model=UserOut)
def update_me(
    body: UserUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Only provided fields are changed, even though this is a PUT."""
    for field, value in body.model_dump(exclude_unset=True).items():
        if field == "name" and value is None:
            continue
        setattr(current_user, field, value)

    db.commit()
    db.refresh(current_user)
    return current_user


@router.post("/me/avatar", response_model=AvatarUploadResponse, dependencies=[Depends(rate_limit("sensitive"))])
async def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload or replace the current user's avatar.

    Validation:
      - Only JPEG, PNG, WebP accepted (415 otherwise)
      - Max 5 MB (413 otherwise)
    """
    contents = await read_image(file, AVATAR_CONTENT_TYPES)
    avatar_url = upload_avatar(contents, str(current_user.id))

    current_user.avatar_url = avatar_url
    db.commit()

    return {"avatar_url": avatar_url, "message": "Avatar updated successfully"}


@router.put("/me/password", response_model=MessageResponse, dependencies=[Depends(rate_limit("sensitive"))])
def change_password(
    body: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.change_password(db, current_user, body.current_password, body.new_password)
    return {"message": "Password updated successfully"}


@router.get("/me/properties", response_model=List[PropertyOut])
def my_properties(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Property)
        .filter(Property.user_id == current_user.id)
        .order_by(Property.created_at.desc())
        .all()
    )


def inquiries_trend(this_week: int, last_week: int) -> int:
    """Week-over-week change in percent, rounded. 100 when growing from zero."""
    if last_week == 0:
        return 100 if this_week > 0 else 0
    return round((this_week - last_week) / last_week * 100)


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_id = current_user.id
    now = datetime.now(timezone.utc)
    week_ago = now - timedelta(days=7)
    two_weeks_ago = now - timedelta(days=14)

    total_properties = db.query(Property).filter(Property.user_id == user_id).count()
    active_listings = (
        db.query(Property)
        .filter(Property.user_id == user_id, Property.status == "ACTIVE")
        .count()
    )
    total_views = (
        db.query(func.coalesce(func.sum(Property.views), 0))
        .filter(Property.user_id == user_id)
        .scalar()
    )
    received = db.query(Inquiry).filter(Inquiry.receiver_id == user_id)
    total_inquiries = received.count()
    this_week = received.filter(Inquiry.created_at >= week_ago).count()
    last_week = received.filter(
        Inquiry.created_at >= two_weeks_ago, Inquiry.created_at < week_ago
    ).count()
    total_favorites = (
        db.query(Favorite)
        .join(Property, Favorite.property_id == Property.id)
        .filter(Property.user_id == user_id)
        .count()
    )

    # 5 newest listings with their inquiry counts
    inquiry_counts = (
        db.query(Inquiry.property_id, func.count(Inquiry.id).label("n"))
        .group_by(Inquiry.property_id)
        .subquery()
    )
    recent_rows = (
        db.query(Property, func.coalesce(inquiry_counts.c.n, 0))
        .outerjoin(inquiry_counts, inquiry_counts.c.property_id == Property.id)
        .filter(Property.user_id == user_id)
        .order_by(Property.created_at.desc())
        .limit(5)
        .all()
    )
    recent_properties = [
        {
            "id": str(p.id),
            "title": p.title,
            "status": p.status,
            "price": p.price,
            "views": p.views,
            "inquiries": count,
            "created_at": p.created_at,
        }
        for p, count in recent_rows
    ]

    recent_inquiries = [
        {
            "id": str(i.id),
            "name": i.name,
            "email": i.email,
            "message": i.message,
            "status": i.status,
            "property_title": i.property.title if i.property else None,
            "created_at": i.created_at,
        }
        for i in received.options(joinedload(Inquiry.property))
        .order_by(Inquiry.created_at.desc())
        .limit(5)
        .all()
    ]

    notifications = (
        db.query(Notification)
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(10)
        .all()
    )

    return {
        "stats": {
            "total_properties": total_properties,
            "active_listings": active_listings,
            "total_views": int(total_views or 0),
            "total_inquiries": total_inquiries,
            "total_favorites": total_favorites,
            "inquiries_trend": inquiries_trend(this_week, last_week),
        },
        "recent_properties": recent_properties,
        "recent_inquiries": recent_inquiries,
        "notifications": notifications,
    }
