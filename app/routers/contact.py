"""
Public contact form. Messages are stored for the admin enquiries inbox
and copied to ADMIN_EMAIL.
"""
import logging

from fastapi import APIRouter, BackgroundTasks, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.rate_limiter import rate_limit
from app.models.inquiry import ContactMessage
from app.schemas.auth import MessageResponse
from app.schemas.inquiry import ContactCreateRequest
from app.services.email_service import send_contact_form_email

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=MessageResponse,
    status_code=201,
    dependencies=[Depends(rate_limit("contact"))],
)
def submit_contact_form(
    body: ContactCreateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
):
    message = ContactMessage(
        name=body.name,
        email=body.email,
        phone=body.phone,
        subject=body.subject,
        message=body.message,
        status="NEW",
    )
    db.add(message)
    db.commit()

    background_tasks.add_task(
        send_contact_form_email, body.name, body.email, body.phone, body.subject, body.message
    )
    logger.info("Contact message received", extra={"contact_id": str(message.id)})
    return {"message": "Thank you for contacting us. We will get back to you soon."}
