"""
Razorpay webhooks. The signature covers the raw body, so the request is read
as bytes and only parsed as JSON after verification.
"""
import json
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.exceptions import BadRequestException
from app.services import razorpay_service
from app.services.payment_service import handle_webhook_event

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/razorpay")
async def razorpay_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_razorpay_signature: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    body = await request.body()

    if not razorpay_service.verify_webhook_signature(body, x_razorpay_signature):
        raise BadRequestException("Invalid webhook signature")

    try:
        event = json.loads(body)
    except ValueError:
        raise BadRequestException("Invalid webhook payload")
    if not isinstance(event, dict):
        raise BadRequestException("Invalid webhook payload")

    handle_webhook_event(db, event, background_tasks)
    return {"status": "ok"}
