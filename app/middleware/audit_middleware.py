"""
Audit log helper. Not an HTTP middleware: a utility function called
explicitly by admin router handlers after performing any state-changing operation.

Usage in admin routers:
    from app.middleware.audit_middleware import log_admin_action

    @router.post("/properties/{property_id}/approve")
    def approve_property(property_id: uuid.UUID, admin: User = Depends(get_current_admin), ...):
        # ... approve ...
        log_admin_action(db, admin_id=admin.id, action="APPROVE_PROPERTY",
                         target_type="property", target_id=property_id)
"""
import logging
import uuid
from typing import Optional, Union

from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def log_admin_action(
    db: Session,
    admin_id: uuid.UUID,
    action: str,
    target_type: Optional[str] = None,
    target_id: Optional[Union[str, uuid.UUID]] = None,
    details: Optional[dict] = None,
) -> AuditLog:
    """
    Insert an immutable audit log record.

    Args:
        db: database session
        admin_id: id of the admin performing the action
        action: string constant like "APPROVE_PROPERTY", "UPDATE_USER", "SEND_NEWSLETTER"
        target_type: entity type affected ("user", "property", "banner", "plan", ...)
        target_id: id of the affected entity
        details: optional dict with extra context (reasons, before/after values)

    Returns the created AuditLog record.
    """
    log = AuditLog(
        admin_id=admin_id,
        action=action,
        target_type=target_type,
        target_id=str(target_id) if target_id is not None else None,
        details=details,
    )
    db.add(log)
    db.commit()
    db.refresh(log)
    logger.info(
        "Admin action",
        extra={"action": action, "admin_id": str(admin_id), "target_type": target_type, "target_id": log.target_id},
    )
    return log
