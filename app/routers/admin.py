"""
Admin router: all admin-only operations except site content (admin_content.py).

Every endpoint:
  - Requires get_current_admin dependency (user_type == ADMIN)
  - Writes an audit log after any state-changing operation
  - Returns structured responses

Endpoints:
  GET    /admin/dashboard
  GET    /admin/users                      PATCH/DELETE /admin/users/{id}
  GET    /admin/properties                 PATCH/DELETE /admin/properties/{id}
  POST   /admin/properties/{id}/approve    POST /admin/properties/{id}/reject
  GET    /admin/enquiries                  PATCH/DELETE /admin/enquiries/{id}
  GET    /admin/transactions               PATCH /admin/transactions/{id}
  POST   /admin/projects                   PUT/DELETE /admin/projects/{id}
  GET    /admin/membership/plans           POST, PUT/DELETE /admin/membership/plans/{id}
  GET    /admin/membership/requests        PATCH /admin/membership/requests/{id}
  GET    /admin/newsletter                 DELETE /admin/newsletter/{id}
  POST   /admin/newsletter/send
  GET    /admin/featured                   PATCH /admin/featured/{agents|builders}/{id}
  GET    /admin/audit-logs
"""
import logging
import uuid
from typing import List, Literal, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from app.database import get_db
from app.core.dependencies import get_current_admin
from app.core.exceptions import BadRequestException, ConflictException, NotFoundException
from app.core.sanitize import sanitize_html
from app.middleware.audit_middleware import log_admin_action
from app.models.audit_log import AuditLog
from app.models.inquiry import ContactMessage, Inquiry
from app.models.membership import Membership, MembershipPlan, MembershipRequest
from app.models.newsletter import NewsletterSubscription
from app.models.project import Project
from app.models.property import Property
from app.models.transaction import Transaction
from app.models.user import AgentProfile, BuilderProfile, User
from app.schemas.admin import (
    AdminStatsResponse, AdminUserListResponse, AdminUserUpdateRequest,
    AdminPropertyListResponse, AdminPropertyUpdateRequest, RejectPropertyRequest,
    AuditLogListResponse, FeaturedDirectoryResponse, FeatureToggleRequest,
)
from app.schemas.auth import MessageResponse
from app.schemas.inquiry import ContactMessageListResponse, ContactMessageOut, ContactStatusUpdate
from app.schemas.membership import (
    PlanCreateRequest, PlanUpdateRequest, PlanOut, MembershipRequestListResponse,
    MembershipRequestOut, MembershipRequestReview, TransactionListResponse,
    TransactionOut, TransactionStatusUpdate,
)
from app.schemas.newsletter import NewsletterSendRequest, NewsletterSendResponse, SubscriberListResponse
from app.schemas.project import AgentOut, BuilderOut, ProjectCreateRequest, ProjectUpdateRequest, ProjectOut
from app.schemas.property import PropertyOut, PropertyStatus
from app.schemas.user import UserOut
from app.services import email_service, membership_service
from app.services.notification_service import create_notification
from app.services.property_service import get_property_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Dashboard ─────────────────────────────────────────────────────────────────

@router.get("/dashboard", response_model=AdminStatsResponse)
def get_dashboard(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Dashboard overview counts plus the 10 newest listings awaiting review."""
    recent_pending = (
        db.query(Property)
        .filter(Property.status == "PENDING")
        .order_by(Property.created_at.desc())
        .limit(10)
        .all()
    )
    return AdminStatsResponse(
        total_users=db.query(User).count(),
        total_properties=db.query(Property).count(),
        pending_properties=db.query(Property).filter(Property.status == "PENDING").count(),
        active_properties=db.query(Property).filter(Property.status == "ACTIVE").count(),
        total_inquiries=db.query(Inquiry).count(),
        total_agents=db.query(AgentProfile).count(),
        total_builders=db.query(BuilderProfile).count(),
        total_contact_messages=db.query(ContactMessage).count(),
        recent_pending=[PropertyOut.model_validate(p) for p in recent_pending],
    )


# ── User Management ───────────────────────────────────────────────────────────

def _get_user_or_404(db: Session, user_id: uuid.UUID) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundException("User")
    return user


@router.get("/users", response_model=AdminUserListResponse)
def list_users(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Search by name or email"),
    user_type: Optional[Literal["INDIVIDUAL", "AGENT", "BUILDER", "ADMIN"]] = None,
    is_active: Optional[bool] = None,
):
    query = db.query(User)
    if search:
        term = search.strip().lower()
        query = query.filter(
            or_(
                func.lower(User.name).contains(term, autoescape=True),
                func.lower(User.email).contains(term, autoescape=True),
            )
        )
    if user_type:
        query = query.filter(User.user_type == user_type)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)

    total = query.count()
    users = (
        query.order_by(User.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "users": users}


@router.get("/users/{user_id}", response_model=UserOut)
def get_user_detail(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    return _get_user_or_404(db, user_id)


@router.patch("/users/{user_id}", response_model=UserOut)
def update_user(
    user_id: uuid.UUID,
    body: AdminUserUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """
    Deactivating an account rejects its existing JWTs immediately because
    get_current_user checks is_active on every request.
    """
    user = _get_user_or_404(db, user_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if user.id == admin.id and (changes.get("is_active") is False or changes.get("user_type", "ADMIN") != "ADMIN"):
        raise BadRequestException("You cannot deactivate or demote your own account")

    for field, value in changes.items():
        setattr(user, field, value)
    db.commit()
    db.refresh(user)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_USER",
        target_type="user", target_id=user.id,
        details=changes,
    )
    return user


@router.delete("/users/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    if user_id == admin.id:
        raise BadRequestException("You cannot delete your own account")
    user = _get_user_or_404(db, user_id)
    email = user.email

    db.delete(user)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_USER",
        target_type="user", target_id=user_id,
        details={"email": email},
    )
    return {"message": f"User '{email}' deleted."}


# ── Property Moderation ───────────────────────────────────────────────────────

@router.get("/properties", response_model=AdminPropertyListResponse)
def list_properties(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    status: Optional[PropertyStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(Property)
    if status:
        query = query.filter(Property.status == status)

    total = query.count()
    properties = (
        query.order_by(Property.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "properties": properties}


@router.post("/properties/{property_id}/approve", response_model=PropertyOut)
def approve_property(
    property_id: uuid.UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Publishes the listing, then emails and notifies the owner."""
    prop = get_property_or_404(db, property_id)
    previous = prop.status
    prop.status = "ACTIVE"
    db.commit()
    db.refresh(prop)

    owner = prop.owner
    background_tasks.add_task(
        email_service.send_property_approved_email, owner.email, owner.name, prop.title
    )
    create_notification(
        db,
        owner.id,
        "property_approved",
        "Property approved",
        f"Your property \"{prop.title}\" is now live.",
        link=f"/properties/{prop.id}",
        metadata={"property_id": str(prop.id)},
    )
    log_admin_action(
        db, admin_id=admin.id, action="APPROVE_PROPERTY",
        target_type="property", target_id=prop.id,
        details={"from": previous, "to": "ACTIVE"},
    )
    return prop


@router.post("/properties/{property_id}/reject", response_model=PropertyOut)
def reject_property(
    property_id: uuid.UUID,
    body: RejectPropertyRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    prop = get_property_or_404(db, property_id)
    prop.status = "REJECTED"
    db.commit()
    db.refresh(prop)

    owner = prop.owner
    message = f"Your property \"{prop.title}\" was not approved."
    if body.reason:
        message += f" Reason: {body.reason}"

    background_tasks.add_task(
        email_service.send_property_rejected_email, owner.email, owner.name, prop.title, body.reason
    )
    create_notification(
        db,
        owner.id,
        "property_rejected",
        "Property rejected",
        message,
        link="/dashboard/properties",
        metadata={"property_id": str(prop.id), "reason": body.reason},
    )
    log_admin_action(
        db, admin_id=admin.id, action="REJECT_PROPERTY",
        target_type="property", target_id=prop.id,
        details={"reason": body.reason},
    )
    return prop


@router.patch("/properties/{property_id}", response_model=PropertyOut)
def update_property(
    property_id: uuid.UUID,
    body: AdminPropertyUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    prop = get_property_or_404(db, property_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(prop, field, value)
    db.commit()
    db.refresh(prop)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_PROPERTY",
        target_type="property", target_id=prop.id,
        details=changes,
    )
    return prop


@router.delete("/properties/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    prop = get_property_or_404(db, property_id)
    title = prop.title
    db.delete(prop)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_PROPERTY",
        target_type="property", target_id=property_id,
        details={"title": title},
    )
    return {"message": "Property deleted"}


# ── Enquiries (contact form inbox) ────────────────────────────────────────────

def _get_contact_or_404(db: Session, message_id: uuid.UUID) -> ContactMessage:
    message = db.query(ContactMessage).filter(ContactMessage.id == message_id).first()
    if not message:
        raise NotFoundException("Enquiry")
    return message


@router.get("/enquiries", response_model=ContactMessageListResponse)
def list_enquiries(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    status: Optional[Literal["NEW", "READ", "REPLIED"]] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(ContactMessage)
    if status:
        query = query.filter(ContactMessage.status == status)

    total = query.count()
    messages = (
        query.order_by(ContactMessage.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "messages": messages}


@router.patch("/enquiries/{message_id}", response_model=ContactMessageOut)
def update_enquiry(
    message_id: uuid.UUID,
    body: ContactStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    message = _get_contact_or_404(db, message_id)
    message.status = body.status
    db.commit()
    db.refresh(message)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_ENQUIRY",
        target_type="contact_message", target_id=message.id,
        details={"status": body.status},
    )
    return message


@router.delete("/enquiries/{message_id}", response_model=MessageResponse)
def delete_enquiry(
    message_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    message = _get_contact_or_404(db, message_id)
    db.delete(message)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_ENQUIRY",
        target_type="contact_message", target_id=message_id,
    )
    return {"message": "Enquiry deleted"}


# ── Transactions ──────────────────────────────────────────────────────────────

@router.get("/transactions", response_model=TransactionListResponse)
def list_transactions(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    status: Optional[Literal["PENDING", "COMPLETED", "FAILED", "REFUNDED"]] = None,
    type: Optional[Literal["MEMBERSHIP", "LISTING_UPGRADE", "FEATURED"]] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(Transaction)
    if status:
        query = query.filter(Transaction.status == status)
    if type:
        query = query.filter(Transaction.type == type)

    total = query.count()
    transactions = (
        query.order_by(Transaction.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "transactions": transactions}


@router.patch("/transactions/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    transaction_id: uuid.UUID,
    body: TransactionStatusUpdate,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Manual correction, e.g. marking a refund issued from the Razorpay dashboard."""
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundException("Transaction")

    previous = transaction.status
    transaction.status = body.status
    db.commit()
    db.refresh(transaction)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_TRANSACTION",
        target_type="transaction", target_id=transaction.id,
        details={"from": previous, "to": body.status},
    )
    return transaction


# ── Projects ──────────────────────────────────────────────────────────────────

def _check_builder(db: Session, builder_id: uuid.UUID) -> None:
    if not db.query(BuilderProfile).filter(BuilderProfile.id == builder_id).first():
        raise NotFoundException("Builder")


def _get_project_or_404(db: Session, project_id: uuid.UUID) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if not project:
        raise NotFoundException("Project")
    return project


@router.post("/projects", response_model=ProjectOut, status_code=201)
def create_project(
    body: ProjectCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    _check_builder(db, body.builder_id)
    values = body.model_dump()
    if values.get("description"):
        values["description"] = sanitize_html(values["description"])

    project = Project(**values)
    db.add(project)
    db.commit()
    db.refresh(project)

    log_admin_action(
        db, admin_id=admin.id, action="CREATE_PROJECT",
        target_type="project", target_id=project.id,
        details={"name": project.name, "builder_id": str(project.builder_id)},
    )
    return project


@router.put("/projects/{project_id}", response_model=ProjectOut)
def update_project(
    project_id: uuid.UUID,
    body: ProjectUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    project = _get_project_or_404(db, project_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    if "builder_id" in changes:
        _check_builder(db, changes["builder_id"])
    if changes.get("description"):
        changes["description"] = sanitize_html(changes["description"])

    for field, value in changes.items():
        setattr(project, field, value)
    db.commit()
    db.refresh(project)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_PROJECT",
        target_type="project", target_id=project.id,
        details={"fields": sorted(changes)},
    )
    return project


@router.delete("/projects/{project_id}", response_model=MessageResponse)
def delete_project(
    project_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Units listed under the project stay, detached from it."""
    project = _get_project_or_404(db, project_id)
    name = project.name
    db.delete(project)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_PROJECT",
        target_type="project", target_id=project_id,
        details={"name": name},
    )
    return {"message": "Project deleted"}


# ── Membership Plans & Requests ───────────────────────────────────────────────

def _get_plan_or_404(db: Session, plan_id: uuid.UUID) -> MembershipPlan:
    plan = db.query(MembershipPlan).filter(MembershipPlan.id == plan_id).first()
    if not plan:
        raise NotFoundException("Membership plan")
    return plan


@router.get("/membership/plans", response_model=List[PlanOut])
def list_plans(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """All plans, inactive included."""
    return db.query(MembershipPlan).order_by(MembershipPlan.price.asc()).all()


@router.post("/membership/plans", response_model=PlanOut, status_code=201)
def create_plan(
    body: PlanCreateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    plan = MembershipPlan(**body.model_dump())
    db.add(plan)
    db.commit()
    db.refresh(plan)

    log_admin_action(
        db, admin_id=admin.id, action="CREATE_PLAN",
        target_type="membership_plan", target_id=plan.id,
        details={"name": plan.name, "price": plan.price},
    )
    return plan


@router.put("/membership/plans/{plan_id}", response_model=PlanOut)
def update_plan(
    plan_id: uuid.UUID,
    body: PlanUpdateRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    plan = _get_plan_or_404(db, plan_id)
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(plan, field, value)
    db.commit()
    db.refresh(plan)

    log_admin_action(
        db, admin_id=admin.id, action="UPDATE_PLAN",
        target_type="membership_plan", target_id=plan.id,
        details=changes,
    )
    return plan


@router.delete("/membership/plans/{plan_id}", response_model=MessageResponse)
def delete_plan(
    plan_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    plan = _get_plan_or_404(db, plan_id)
    if db.query(Membership).filter(Membership.plan_id == plan.id).first():
        raise ConflictException("Plan has members. Deactivate it instead of deleting.")

    name = plan.name
    db.delete(plan)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_PLAN",
        target_type="membership_plan", target_id=plan_id,
        details={"name": name},
    )
    return {"message": "Membership plan deleted"}


@router.get("/membership/requests", response_model=MembershipRequestListResponse)
def list_membership_requests(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    status: Optional[Literal["PENDING", "APPROVED", "REJECTED"]] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    query = db.query(MembershipRequest)
    if status:
        query = query.filter(MembershipRequest.status == status)

    total = query.count()
    requests = (
        query.order_by(MembershipRequest.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "requests": requests}


@router.patch("/membership/requests/{request_id}", response_model=MembershipRequestOut)
def review_membership_request(
    request_id: uuid.UUID,
    body: MembershipRequestReview,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    request = db.query(MembershipRequest).filter(MembershipRequest.id == request_id).first()
    if not request:
        raise NotFoundException("Membership request")
    if request.status != "PENDING":
        raise ConflictException(f"Request already {request.status.lower()}")

    membership = membership_service.review_request(db, request, body.status)
    if membership is not None:
        user = request.user
        create_notification(
            db,
            user.id,
            "membership_activated",
            "Membership activated",
            f"Your {request.requested_plan} membership request was approved.",
            link="/dashboard",
            metadata={"plan_id": str(request.plan_id), "request_id": str(request.id)},
        )
        background_tasks.add_task(
            email_service.send_membership_activated_email,
            user.email, user.name, request.requested_plan, membership.end_date,
        )

    log_admin_action(
        db, admin_id=admin.id, action=f"{body.status}_MEMBERSHIP_REQUEST",
        target_type="membership_request", target_id=request.id,
        details={"plan": request.requested_plan, "user_id": str(request.user_id)},
    )
    return request


# ── Newsletter ────────────────────────────────────────────────────────────────

@router.get("/newsletter", response_model=SubscriberListResponse)
def list_subscribers(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    is_active: Optional[bool] = None,
):
    query = db.query(NewsletterSubscription)
    if is_active is not None:
        query = query.filter(NewsletterSubscription.is_active == is_active)

    subscribers = query.order_by(NewsletterSubscription.created_at.desc()).all()
    active_count = (
        db.query(NewsletterSubscription)
        .filter(NewsletterSubscription.is_active == True)
        .count()
    )
    return {"total": len(subscribers), "active_count": active_count, "subscribers": subscribers}


@router.delete("/newsletter/{subscriber_id}", response_model=MessageResponse)
def delete_subscriber(
    subscriber_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    subscriber = (
        db.query(NewsletterSubscription)
        .filter(NewsletterSubscription.id == subscriber_id)
        .first()
    )
    if not subscriber:
        raise NotFoundException("Subscriber")
    email = subscriber.email
    db.delete(subscriber)
    db.commit()

    log_admin_action(
        db, admin_id=admin.id, action="DELETE_SUBSCRIBER",
        target_type="newsletter_subscription", target_id=subscriber_id,
        details={"email": email},
    )
    return {"message": "Subscriber removed"}


@router.post("/newsletter/send", response_model=NewsletterSendResponse)
async def send_newsletter(
    body: NewsletterSendRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """
    Sends synchronously so the response can report delivery counts.
    Content is sanitised before it reaches any inbox.
    """
    if body.recipients == "all":
        recipients = [
            email for (email,) in db.query(NewsletterSubscription.email)
            .filter(NewsletterSubscription.is_active == True)
            .all()
        ]
    else:
        recipients = sorted({str(email).lower() for email in body.recipients})

    if not recipients:
        raise BadRequestException("No recipients to send to")

    result = await email_service.send_newsletter(recipients, body.subject, sanitize_html(body.content))

    log_admin_action(
        db, admin_id=admin.id, action="SEND_NEWSLETTER",
        target_type="newsletter",
        details={"subject": body.subject, "sent": result["success"], "failed": result["failed"]},
    )
    return {
        "message": f"Newsletter sent to {result['success']} recipients",
        "sent": result["success"],
        "failed": result["failed"],
    }


# ── Featured Directory ────────────────────────────────────────────────────────

@router.get("/featured", response_model=FeaturedDirectoryResponse)
def get_featured_directory(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    """Featured agents and builders as shown on the home page, plus directory counts."""
    agents = (
        db.query(AgentProfile)
        .options(joinedload(AgentProfile.user))
        .filter(AgentProfile.is_featured.is_(True))
        .order_by(AgentProfile.rating.desc())
        .all()
    )
    builders = (
        db.query(BuilderProfile)
        .options(joinedload(BuilderProfile.user))
        .filter(BuilderProfile.is_featured.is_(True))
        .order_by(BuilderProfile.company_name.asc())
        .all()
    )
    return {
        "stats": {
            "total_agents": db.query(AgentProfile).count(),
            "featured_agents": len(agents),
            "total_builders": db.query(BuilderProfile).count(),
            "featured_builders": len(builders),
        },
        "agents": agents,
        "builders": builders,
    }


def _set_featured(db: Session, admin: User, profile, resource: str, is_featured: bool):
    profile.is_featured = is_featured
    db.commit()
    db.refresh(profile)

    verb = "FEATURE" if is_featured else "UNFEATURE"
    log_admin_action(
        db, admin_id=admin.id, action=f"{verb}_{resource.upper()}",
        target_type=resource, target_id=profile.id,
    )
    return profile


@router.patch("/featured/agents/{agent_id}", response_model=AgentOut)
def feature_agent(
    agent_id: uuid.UUID,
    body: FeatureToggleRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    agent = db.query(AgentProfile).filter(AgentProfile.id == agent_id).first()
    if not agent:
        raise NotFoundException("Agent")
    return _set_featured(db, admin, agent, "agent", body.is_featured)


@router.patch("/featured/builders/{builder_id}", response_model=BuilderOut)
def feature_builder(
    builder_id: uuid.UUID,
    body: FeatureToggleRequest,
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
):
    builder = db.query(BuilderProfile).filter(BuilderProfile.id == builder_id).first()
    if not builder:
        raise NotFoundException("Builder")
    return _set_featured(db, admin, builder, "builder", body.is_featured)


# ── Audit Logs ────────────────────────────────────────────────────────────────

@router.get("/audit-logs", response_model=AuditLogListResponse)
def get_audit_logs(
    db: Session = Depends(get_db),
    admin: User = Depends(get_current_admin),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200),
    action: Optional[str] = None,
):
    """
    Immutable audit trail of admin actions, newest first.
    Optionally filter by action type (e.g. APPROVE_PROPERTY, UPDATE_USER).
    """
    query = db.query(AuditLog)
    if action:
        query = query.filter(AuditLog.action == action.upper())

    total = query.count()
    logs = (
        query.order_by(AuditLog.created_at.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {"total": total, "page": page, "limit": limit, "logs": logs}
