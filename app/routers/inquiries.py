"""
Inquiries router: buyers contacting listing owners.

  POST  /inquiries        → anyone (login optional); emails + notifies the receiver
  GET   /inquiries        → inquiries the caller sent or received
  PATCH /inquiries/{id}   → receiver or admin updates status
"""
import logging
import uuid
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_user, get_optional_user
from app.core.exceptions import ForbiddenException, NotFoundException
from app.core.rate_limiter import rate_limit
from app.models.inquiry import Inquiry
from app.models.property import Property
from app.models.user import User
from app.schemas.inquiry import (
    InquiryCreateRequest, InquiryStatusUpdate, InquiryOut, InquiryListResponse,
)
from app.services.email_service import send_inquiry_email
from app.services.notification_service import create_notification

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=InquiryOut,
    status_code=201,
    dependencies=[Depends(rate_limit("contact"))],
)
def create_inquiry(
    body: InquiryCreateRequest,
    background_tasks: BackgroundTasks,
    current_user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    receiver = db.query(User).filter(User.id == body.receiver_id).first()
    if not receiver:
        raise NotFoundException("Receiver")

    prop = None
    if body.property_id is not None:
        prop = db.query(Property).filter(Property.id == body.property_id).first()
        if not prop:
            raise NotFoundException("Property")

    inquiry = Inquiry(
        sender_id=current_user.id if current_user else None,
        receiver_id=receiver.id,
        property_id=prop.id if prop else None,
        name=body.name,
        email=body.email,
        phone=body.phone,
        message=body.message,
        status="PENDING",
    )
    db.add(inquiry)
    db.commit()
    db.refresh(inquiry)

    property_title = prop.title if prop else None
    background_tasks.add_task(
        send_inquiry_email,
        receiver.email,
        receiver.name,
        body.name,
        body.email,
        body.phone,
        body.message,
        property_title,
    )
    create_notification(
        db,
        user_id=receiver.id,
        type="inquiry",
        title="New inquiry received",
        message=f"{body.name} sent an inquiry" + (f" about {property_title}" if property_title else ""),
        link="/dashboard/inquiries",
        metadata={"inquiry_id": str(inquiry.id), "property_id": str(prop.id) if prop else None},
    )

    logger.info("Inquiry created", extra={"inquiry_id": str(inquiry.id), "receiver_id": str(receiver.id)})
    return InquiryOut.from_inquiry(inquiry)


@router.get("", response_model=InquiryListResponse)
def list_inquiries(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    inquiries = (
        db.query(Inquiry)
        .options(joinedload(Inquiry.property))
        .filter(or_(Inquiry.sender_id == current_user.id, Inquiry.receiver_id == current_user.id))
        .order_by(Inquiry.created_at.desc())
        .all()
    )
    return {
        "total": len(inquiries),
        "inquiries": [InquiryOut.from_inquiry(i) for i in inquiries],
    }


@router.patch("/{inquiry_id}", response_model=InquiryOut)
def update_inquiry_status(
    inquiry_id: uuid.UUID,
    body: InquiryStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    inquiry = db.query(Inquiry).filter(Inquiry.id == inquiry_id).first()
    if not inquiry:
        raise NotFoundException("Inquiry")
    if inquiry.receiver_id != current_user.id and not current_user.is_admin:
        raise ForbiddenException("Only the receiver can update this inquiry")

    inquiry.status = body.status
    db.commit()
    db.refresh(inquiry)
    return InquiryOut.from_inquiry(inquiry)
