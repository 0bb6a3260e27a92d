"""
Favorites router: a user's saved listings.
"""
import uuid
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import ConflictException, NotFoundException
from app.models.property import Favorite
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.property import FavoriteCreateRequest, FavoriteOut
from app.services.property_service import get_property_or_404

router = APIRouter()


@router.get("", response_model=List[FavoriteOut])
def list_favorites(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(Favorite)
        .options(joinedload(Favorite.property))
        .filter(Favorite.user_id == current_user.id)
        .order_by(Favorite.created_at.desc())
        .all()
    )


@router.post("", response_model=FavoriteOut, status_code=201)
def add_favorite(
    body: FavoriteCreateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    get_property_or_404(db, body.property_id)

    existing = (
        db.query(Favorite)
        .filter(Favorite.user_id == current_user.id, Favorite.property_id == body.property_id)
        .first()
    )
    if existing:
        raise ConflictException("Property is already in favorites")

    favorite = Favorite(user_id=current_user.id, property_id=body.property_id)
    db.add(favorite)
    try:
        db.commit()
    except IntegrityError:
        # concurrent save of the same property
        db.rollback()
        raise ConflictException("Property is already in favorites")
    db.refresh(favorite)
    return favorite


@router.delete("/{property_id}", response_model=MessageResponse)
def remove_favorite(
    property_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    deleted = (
        db.query(Favorite)
        .filter(Favorite.user_id == current_user.id, Favorite.property_id == property_id)
        .delete(synchronize_session=False)
    )
    if not deleted:
        raise NotFoundException("Favorite")
    db.commit()
    return {"message": "Removed from favorites"}
