"""
In-app notifications. Rows are written synchronously with the action that
caused them; the optional email copy goes out through BackgroundTasks.
"""
import logging
import uuid
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from app.models.notification import Notification
from app.models.user import User
from app.services import email_service

logger = logging.getLogger(__name__)

NOTIFICATION_TYPES = (
    "inquiry",
    "property_approved",
    "property_rejected",
    "membership_activated",
    "payment_success",
    "payment_failed",
    "system",
)


def create_notification(
    db: Session,
    user_id: uuid.UUID,
    type: str,
    title: str,
    message: str,
    link: Optional[str] = None,
    metadata: Optional[dict] = None,
    send_email: bool = False,
    background_tasks: Optional[BackgroundTasks] = None,
) -> Notification:
    """
    Stores a notification for user_id and commits.
    With send_email=True an email copy is queued on background_tasks.
    """
    if type not in NOTIFICATION_TYPES:
        raise ValueError(f"Unknown notification type: {type}")

    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        link=link,
        extra=metadata,
    )
    db.add(notification)
    db.commit()
    db.refresh(notification)

    if send_email and background_tasks is not None:
        user = db.query(User).filter(User.id == user_id).first()
        if user:
            background_tasks.add_task(
                email_service.send_notification_email, user.email, user.name, title, message, link
            )

    logger.info(
        "Notification created",
        extra={"user_id": str(user_id), "type": type, "notification_id": str(notification.id)},
    )
    return notification


def list_notifications(
    db: Session,
    user_id: uuid.UUID,
    page: int = 1,
    limit: int = 20,
    unread_only: bool = False,
) -> tuple[list[Notification], int, int]:
    """Returns (page of notifications newest first, total matching, unread count)."""
    query = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        query = query.filter(Notification.read == False)

    total = query.count()
    notifications = (
        query.order_by(Notification.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    unread_count = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.read == False)
        .count()
    )
    return notifications, total, unread_count


def mark_as_read(db: Session, user_id: uuid.UUID, notification_id: uuid.UUID) -> bool:
    updated = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    return updated > 0


def mark_all_as_read(db: Session, user_id: uuid.UUID) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.read == False)
        .update({"read": True}, synchronize_session=False)
    )
    db.commit()
    return updated


def delete_notification(db: Session, user_id: uuid.UUID, notification_id: uuid.UUID) -> bool:
    deleted = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
