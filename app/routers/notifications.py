"""
Notifications router. Every operation is scoped to the caller's own rows.
"""
import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import NotFoundException
from app.models.user import User
from app.schemas.auth import MessageResponse
from app.schemas.notification import NotificationListResponse
from app.services import notification_service

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    unread_only: bool = False,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    notifications, total, unread_count = notification_service.list_notifications(
        db, current_user.id, page=page, limit=limit, unread_only=unread_only
    )
    return {"notifications": notifications, "total": total, "unread_count": unread_count}


# Declared before /{notification_id}/read so "read-all" is not parsed as an id
@router.put("/read-all", response_model=MessageResponse)
def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    count = notification_service.mark_all_as_read(db, current_user.id)
    return {"message": f"{count} notifications marked as read"}


@router.put("/{notification_id}/read", response_model=MessageResponse)
def mark_read(
    notification_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not notification_service.mark_as_read(db, current_user.id, notification_id):
        raise NotFoundException("Notification")
    return {"message": "Notification marked as read"}


@router.delete("/{notification_id}", response_model=MessageResponse)
def delete_notification(
    notification_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not notification_service.delete_notification(db, current_user.id, notification_id):
        raise NotFoundException("Notification")
    return {"message": "Notification deleted"}
