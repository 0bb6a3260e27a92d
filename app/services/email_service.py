"""
Email service using fastapi-mail over SMTP.

Gmail setup steps (do this once):
  1. Enable 2-Factor Authentication on your Gmail account
  2. Go to: Google Account → Security → App Passwords
  3. Create an app password for "Mail"
  4. Use that 16-character password as MAIL_PASSWORD in your .env
     (NOT your real Gmail password)

When MAIL_USERNAME / MAIL_PASSWORD / MAIL_FROM are not all set, messages are
logged instead of sent and treated as delivered, so local development and
tests never touch the network.

Senders are async and are normally scheduled through FastAPI BackgroundTasks,
so the HTTP response is returned before SMTP completes.
"""
import asyncio
import logging
from datetime import datetime
from functools import lru_cache
from html import escape
from typing import NamedTuple, Optional, Union

from fastapi_mail import FastMail, MessageSchema, ConnectionConfig, MessageType
from fastapi_mail.schemas import MultipartSubtypeEnum

from app.config import settings
from app.core.sanitize import strip_html

logger = logging.getLogger(__name__)

NEWSLETTER_BATCH_SIZE = 50


class EmailTemplate(NamedTuple):
    subject: str
    html: str
    text: str


@lru_cache()
def get_mailer() -> Optional[FastMail]:
    """Builds the SMTP client once; None when mail is not configured."""
    if not settings.email_configured:
        logger.warning("Email configuration incomplete - emails will be logged only")
        return None

    mail_config = ConnectionConfig(
        MAIL_USERNAME=settings.mail_username,
        MAIL_PASSWORD=settings.mail_password,
        MAIL_FROM=settings.mail_from,
        MAIL_FROM_NAME=settings.app_name,
        MAIL_PORT=settings.mail_port,
        MAIL_SERVER=settings.mail_server,
        MAIL_STARTTLS=settings.mail_port != 465,  # STARTTLS on 587
        MAIL_SSL_TLS=settings.mail_port == 465,   # implicit TLS on 465
        USE_CREDENTIALS=True,
        VALIDATE_CERTS=True,
    )
    return FastMail(mail_config)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    html: str,
    text: Optional[str] = None,
) -> bool:
    """
    Sends one message. Returns False (and logs) on SMTP failure instead of raising,
    since callers run in background tasks where nobody could handle the error.
    """
    recipients = [to] if isinstance(to, str) else list(to)
    mailer = get_mailer()

    if mailer is None:
        logger.info("Email would be sent (no transport configured)", extra={"to": recipients, "subject": subject})
        return True

    fields = {}
    if text:
        # plain-text part for clients that do not render HTML
        fields = {"alternative_body": text, "multipart_subtype": MultipartSubtypeEnum.alternative}

    message = MessageSchema(
        subject=subject,
        recipients=recipients,
        body=html,
        subtype=MessageType.html,
        **fields,
    )

    try:
        await mailer.send_message(message)
    except Exception:
        logger.exception("Failed to send email", extra={"to": recipients, "subject": subject})
        return False

    logger.info("Email sent", extra={"to": recipients, "subject": subject})
    return True


# ── Templates ─────────────────────────────────────────────────────────────────
# Every interpolated user value goes through escape(); only newsletter content
# (already sanitised HTML) is inserted raw.

def _layout(heading: str, body_html: str, color: str = "#2563eb", footer: str = "") -> str:
    year = datetime.now().year
    return (
        '<!DOCTYPE html><html><head><meta charset="utf-8"></head>'
        '<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333; '
        'max-width: 600px; margin: 0 auto; padding: 20px;">'
        f'<div style="background: {color}; padding: 20px; text-align: center; border-radius: 8px 8px 0 0;">'
        f'<h2 style="color: white; margin: 0;">{heading}</h2></div>'
        f'<div style="background: #f9f9f9; padding: 30px; border-radius: 0 0 8px 8px;">{body_html}</div>'
        '<div style="text-align: center; padding: 20px; color: #666; font-size: 12px;">'
        f"{footer}<p>&copy; {year} {escape(settings.app_name)}. All rights reserved.</p></div>"
        "</body></html>"
    )


def _button(href: str, label: str, color: str = "#2563eb") -> str:
    return (
        '<div style="text-align: center; margin: 30px 0;">'
        f'<a href="{escape(href)}" style="background: {color}; color: white; padding: 12px 30px; '
        f'text-decoration: none; border-radius: 5px; display: inline-block;">{label}</a></div>'
    )


def welcome_template(name: str) -> EmailTemplate:
    app = settings.app_name
    body = (
        f"<p>Hi {escape(name)},</p>"
        f"<p>Thank you for joining {escape(app)}, your trusted real estate marketplace!</p>"
        "<p>With your new account, you can:</p>"
        "<ul><li>Browse thousands of properties</li><li>Save your favorite listings</li>"
        "<li>Connect directly with agents and builders</li></ul>"
        + _button(settings.app_url, "Browse Properties", "#667eea")
    )
    text = (
        f"Welcome to {app}!\n\nHi {name},\n\n"
        f"Thank you for joining {app}, your trusted real estate marketplace!\n\n"
        f"Visit {settings.app_url} to start exploring!"
    )
    return EmailTemplate(f"Welcome to {app}!", _layout(f"Welcome to {escape(app)}!", body, "#667eea"), text)


def otp_template(otp: str, purpose: str) -> EmailTemplate:
    app = settings.app_name
    if purpose == "forgot_password":
        subject = f"Reset your {app} password"
        intro = "Use this code to reset your password:"
        outro = "If you did not request a password reset, please ignore this email."
    else:
        subject = f"Verify your {app} email"
        intro = "Use this code to verify your email address:"
        outro = "If you did not create an account, please ignore this email."

    body = (
        f"<p>{intro}</p>"
        f'<p style="font-size: 28px; font-weight: bold; letter-spacing: 6px; text-align: center;">{escape(otp)}</p>'
        "<p>This code is valid for 10 minutes. Do not share it with anyone.</p>"
        f'<p style="color: #666; font-size: 14px;">{outro}</p>'
    )
    text = f"{intro}\n\n{otp}\n\nThis code is valid for 10 minutes. Do not share it with anyone.\n\n{outro}"
    return EmailTemplate(subject, _layout(escape(subject), body), text)


def inquiry_received_template(
    receiver_name: str,
    sender_name: str,
    sender_email: str,
    sender_phone: Optional[str],
    message: str,
    property_title: Optional[str] = None,
) -> EmailTemplate:
    app = settings.app_name
    suffix = f" for {property_title}" if property_title else ""
    subject = f"New Inquiry{suffix} - {app}"
    about = f" for <strong>{escape(property_title)}</strong>" if property_title else ""
    phone_row = f"<p><strong>Phone:</strong> {escape(sender_phone)}</p>" if sender_phone else ""
    body = (
        f"<p>Hi {escape(receiver_name)},</p>"
        f"<p>You have received a new inquiry{about}.</p>"
        '<div style="background: white; padding: 20px; border-radius: 8px; border-left: 4px solid #2563eb;">'
        f"<p><strong>From:</strong> {escape(sender_name)}</p>"
        f'<p><strong>Email:</strong> <a href="mailto:{escape(sender_email)}">{escape(sender_email)}</a></p>'
        f"{phone_row}"
        "<p><strong>Message:</strong></p>"
        f'<p style="white-space: pre-wrap;">{escape(message)}</p></div>'
        + _button(f"mailto:{sender_email}", "Reply to Inquiry")
    )
    text = (
        f"Hi {receiver_name},\n\nYou have received a new inquiry{suffix}.\n\n"
        f"From: {sender_name}\nEmail: {sender_email}\n"
        + (f"Phone: {sender_phone}\n" if sender_phone else "")
        + f"\nMessage:\n{message}"
    )
    return EmailTemplate(subject, _layout("New Inquiry Received", body), text)


def contact_form_template(
    name: str,
    email: str,
    phone: Optional[str],
    subject: Optional[str],
    message: str,
) -> EmailTemplate:
    rows = [
        f"<p><strong>Name:</strong> {escape(name)}</p>",
        f'<p><strong>Email:</strong> <a href="mailto:{escape(email)}">{escape(email)}</a></p>',
    ]
    if phone:
        rows.append(f"<p><strong>Phone:</strong> {escape(phone)}</p>")
    if subject:
        rows.append(f"<p><strong>Subject:</strong> {escape(subject)}</p>")
    body = (
        '<div style="background: white; padding: 20px; border-radius: 8px; border-left: 4px solid #059669;">'
        + "".join(rows)
        + f'<p><strong>Message:</strong></p><p style="white-space: pre-wrap;">{escape(message)}</p></div>'
    )
    text = f"Name: {name}\nEmail: {email}\n"
    if phone:
        text += f"Phone: {phone}\n"
    if subject:
        text += f"Subject: {subject}\n"
    text += f"\nMessage:\n{message}"
    return EmailTemplate(
        f"Contact Form: {subject or 'New Message'} - {settings.app_name}",
        _layout("Contact Form Submission", body, "#059669"),
        text,
    )


def property_approved_template(user_name: str, property_title: str) -> EmailTemplate:
    app = settings.app_name
    body = (
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>Great news! Your property listing <strong>\"{escape(property_title)}\"</strong> "
        f"has been approved and is now live on {escape(app)}.</p>"
        "<p>Potential buyers and renters can now view your listing and contact you directly.</p>"
        + _button(f"{settings.app_url}/dashboard", "View Your Listings", "#059669")
        + '<p style="color: #666; font-size: 14px;">Tip: Consider upgrading to a Featured or '
        "Premium listing to get more visibility!</p>"
    )
    text = (
        f"Hi {user_name},\n\nYour property listing \"{property_title}\" has been approved "
        f"and is now live on {app}.\n\nView your listings: {settings.app_url}/dashboard"
    )
    return EmailTemplate(
        f"Your Property \"{property_title}\" Has Been Approved! - {app}",
        _layout("Property Approved!", body, "#059669"),
        text,
    )


def property_rejected_template(user_name: str, property_title: str, reason: Optional[str]) -> EmailTemplate:
    app = settings.app_name
    reason_html = f"<p><strong>Reason:</strong> {escape(reason)}</p>" if reason else ""
    body = (
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>Unfortunately your property listing <strong>\"{escape(property_title)}\"</strong> "
        "was not approved.</p>"
        f"{reason_html}"
        "<p>You can edit the listing and submit it again.</p>"
    )
    text = f"Hi {user_name},\n\nYour property listing \"{property_title}\" was not approved."
    if reason:
        text += f"\n\nReason: {reason}"
    return EmailTemplate(
        f"Update on your listing \"{property_title}\" - {app}",
        _layout("Listing Not Approved", body, "#dc2626"),
        text,
    )


def membership_activated_template(user_name: str, plan_name: str, end_date: datetime) -> EmailTemplate:
    app = settings.app_name
    until = end_date.strftime("%d %b %Y")
    body = (
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>Your <strong>{escape(plan_name)}</strong> membership is now active until "
        f"<strong>{until}</strong>.</p>"
        + _button(f"{settings.app_url}/dashboard", "Go to Dashboard", "#7c3aed")
    )
    text = f"Hi {user_name},\n\nYour {plan_name} membership is now active until {until}."
    return EmailTemplate(
        f"Your {plan_name} membership is active - {app}",
        _layout("Membership Activated", body, "#7c3aed"),
        text,
    )


def payment_failed_template(user_name: str, amount: float, reason: Optional[str]) -> EmailTemplate:
    app = settings.app_name
    reason_html = f"<p><strong>Reason:</strong> {escape(reason)}</p>" if reason else ""
    body = (
        f"<p>Hi {escape(user_name)},</p>"
        f"<p>Your payment of <strong>&#8377;{amount:,.2f}</strong> could not be completed.</p>"
        f"{reason_html}"
        "<p>No money has been deducted for this attempt. Please try again.</p>"
    )
    text = f"Hi {user_name},\n\nYour payment of Rs. {amount:,.2f} could not be completed."
    if reason:
        text += f"\n\nReason: {reason}"
    return EmailTemplate(f"Payment failed - {app}", _layout("Payment Failed", body, "#dc2626"), text)


def notification_template(user_name: str, title: str, message: str, link: Optional[str]) -> EmailTemplate:
    body = f"<p>Hi {escape(user_name)},</p><p>{escape(message)}</p>"
    if link:
        body += _button(f"{settings.app_url}{link}", "View Details")
    text = f"Hi {user_name},\n\n{message}"
    return EmailTemplate(f"{title} - {settings.app_name}", _layout(escape(title), body), text)


def newsletter_template(subject: str, content: str) -> EmailTemplate:
    """`content` must already be sanitised HTML."""
    app = settings.app_name
    footer = "<p>You received this email because you subscribed to our newsletter.</p>"
    text = (
        f"{app} Newsletter\n\n{subject}\n\n{strip_html(content)}\n\n"
        "You received this email because you subscribed to our newsletter."
    )
    return EmailTemplate(
        f"{subject} - {app} Newsletter",
        _layout(f"{escape(app)} Newsletter", content, "#667eea", footer),
        text,
    )


# ── Senders ───────────────────────────────────────────────────────────────────

async def send_welcome_email(to: str, name: str) -> bool:
    t = welcome_template(name)
    return await send_email(to, t.subject, t.html, t.text)


async def send_otp_email(to: str, otp: str, purpose: str) -> bool:
    """
    Args:
        to: recipient email address
        otp: the raw 6-digit OTP string (never stored raw in DB)
        purpose: "verify_email" | "forgot_password"
    """
    t = otp_template(otp, purpose)
    return await send_email(to, t.subject, t.html, t.text)


async def send_inquiry_email(
    to: str,
    receiver_name: str,
    sender_name: str,
    sender_email: str,
    sender_phone: Optional[str],
    message: str,
    property_title: Optional[str] = None,
) -> bool:
    t = inquiry_received_template(receiver_name, sender_name, sender_email, sender_phone, message, property_title)
    return await send_email(to, t.subject, t.html, t.text)


async def send_contact_form_email(
    name: str,
    email: str,
    phone: Optional[str],
    subject: Optional[str],
    message: str,
) -> bool:
    if not settings.admin_email:
        logger.warning("ADMIN_EMAIL not set, contact form notification skipped")
        return False
    t = contact_form_template(name, email, phone, subject, message)
    return await send_email(settings.admin_email, t.subject, t.html, t.text)


async def send_property_approved_email(to: str, user_name: str, property_title: str) -> bool:
    t = property_approved_template(user_name, property_title)
    return await send_email(to, t.subject, t.html, t.text)


async def send_property_rejected_email(to: str, user_name: str, property_title: str, reason: Optional[str]) -> bool:
    t = property_rejected_template(user_name, property_title, reason)
    return await send_email(to, t.subject, t.html, t.text)


async def send_membership_activated_email(to: str, user_name: str, plan_name: str, end_date: datetime) -> bool:
    t = membership_activated_template(user_name, plan_name, end_date)
    return await send_email(to, t.subject, t.html, t.text)


async def send_payment_failed_email(to: str, user_name: str, amount: float, reason: Optional[str]) -> bool:
    t = payment_failed_template(user_name, amount, reason)
    return await send_email(to, t.subject, t.html, t.text)


async def send_notification_email(to: str, user_name: str, title: str, message: str, link: Optional[str]) -> bool:
    t = notification_template(user_name, title, message, link)
    return await send_email(to, t.subject, t.html, t.text)


async def send_newsletter(recipients: list[str], subject: str, content: str) -> dict:
    """
    Sends the newsletter to each recipient individually (no shared To: list),
    NEWSLETTER_BATCH_SIZE messages at a time. Returns {"success": n, "failed": m}.
    """
    t = newsletter_template(subject, content)
    success = failed = 0

    for start in range(0, len(recipients), NEWSLETTER_BATCH_SIZE):
        batch = recipients[start:start + NEWSLETTER_BATCH_SIZE]
        results = await asyncio.gather(
            *(send_email(email, t.subject, t.html, t.text) for email in batch)
        )
        success += sum(1 for ok in results if ok)
        failed += sum(1 for ok in results if not ok)

    logger.info("Newsletter sent", extra={"subject": subject, "sent": success, "failed": failed})
    return {"success": success, "failed": failed}
