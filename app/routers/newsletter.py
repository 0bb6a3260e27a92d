"""
Public newsletter signup. Sending and subscriber management are admin routes.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.rate_limiter import rate_limit
from app.models.newsletter import NewsletterSubscription
from app.schemas.auth import MessageResponse
from app.schemas.newsletter import NewsletterSubscribeRequest

router = APIRouter()


@router.post("/subscribe", response_model=MessageResponse, dependencies=[Depends(rate_limit("contact"))])
def subscribe(body: NewsletterSubscribeRequest, db: Session = Depends(get_db)):
    """Idempotent: subscribing twice is fine, and a past unsubscribe is undone."""
    subscription = (
        db.query(NewsletterSubscription)
        .filter(NewsletterSubscription.email == body.email)
        .first()
    )
    if subscription:
        if not subscription.is_active:
            subscription.is_active = True
            db.commit()
        return {"message": "Subscribed to the newsletter"}

    db.add(NewsletterSubscription(email=body.email))
    db.commit()
    return {"message": "Subscribed to the newsletter"}


@router.post("/unsubscribe", response_model=MessageResponse, dependencies=[Depends(rate_limit("contact"))])
def unsubscribe(body: NewsletterSubscribeRequest, db: Session = Depends(get_db)):
    subscription = (
        db.query(NewsletterSubscription)
        .filter(NewsletterSubscription.email == body.email)
        .first()
    )
    if subscription and subscription.is_active:
        subscription.is_active = False
        db.commit()
    return {"message": "Unsubscribed from the newsletter"}
