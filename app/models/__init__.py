# models/__init__.py
# Import all models here so that:
# 1. Alembic's env.py can import this single module and detect all tables.
# 2. SQLAlchemy relationship() calls resolve correctly (all classes in same metadata).
# Order matters: models with no foreign keys first, then dependents.

from app.models.user import User, AgentProfile, BuilderProfile
from app.models.project import Project
from app.models.property import Property, Favorite
from app.models.inquiry import Inquiry, ContactMessage
from app.models.notification import Notification
from app.models.membership import MembershipPlan, Membership, MembershipRequest
from app.models.transaction import Transaction
from app.models.content import (
    Advertisement, Banner, FAQ, LoanOffer, Testimonial, City, Locality, Category, SiteSetting,
)
from app.models.newsletter import NewsletterSubscription
from app.models.otp import OTPRecord
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "AgentProfile",
    "BuilderProfile",
    "Project",
    "Property",
    "Favorite",
    "Inquiry",
    "ContactMessage",
    "Notification",
    "MembershipPlan",
    "Membership",
    "MembershipRequest",
    "Transaction",
    "Advertisement",
    "Banner",
    "FAQ",
    "LoanOffer",
    "Testimonial",
    "City",
    "Locality",
    "Category",
    "SiteSetting",
    "NewsletterSubscription",
    "OTPRecord",
    "AuditLog",
]
