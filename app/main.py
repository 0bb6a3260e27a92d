"""
Application entry point.

Run locally:
    uvicorn app.main:app --reload --port 8000

In Docker:
    CMD ["uvicorn", "app.main:app", "--host", "0.0.0.0", "--port", "8000"]

API docs available at:
    http://localhost:8000/docs   (Swagger UI)
    http://localhost:8000/redoc  (ReDoc)
"""
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.core.logging import configure_logging
from app.core.rate_limiter import limiter
from app.middleware.security_headers import security_headers_middleware
from app.routers import (
    auth, users, properties, projects, agents, builders, favorites, inquiries, contact,
    notifications, memberships, payments, webhooks, newsletter, upload, content, health,
    admin, admin_content,
)

logger = logging.getLogger(__name__)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for errors no router handled. Details go to the log, not the client."""
    logger.exception(
        "Unhandled exception",
        extra={"method": request.method, "path": request.url.path},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="PropEstate API",
        description=(
            "Backend for a real-estate listing platform. "
            "Supports property search and moderation, builder projects, agent and builder "
            "directories, inquiries, notifications, memberships with Razorpay payments, "
            "newsletters and a full admin panel."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # ── Rate Limiter ──────────────────────────────────────────────────────────
    # Attach limiter to app state (required by slowapi)
    # Register the 429 handler so exceeded limits return proper JSON
    # Per-route profiles are FastAPI dependencies (see core/rate_limiter.py)
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ── Security headers / CORS ───────────────────────────────────────────────
    # In production, CORS_ORIGINS in .env should only list your frontend domain
    # e.g., CORS_ORIGINS=https://yourdomain.com
    app.middleware("http")(security_headers_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────────────
    # Order doesn't affect routing but keeping them grouped by domain is clean.

    # Auth (public, no auth dependency inside the router itself)
    app.include_router(auth.router, prefix="/auth", tags=["Auth"])
    app.include_router(users.router, prefix="/users", tags=["Users"])

    # Listings and directories
    app.include_router(properties.router, prefix="/properties", tags=["Properties"])
    app.include_router(projects.router, prefix="/projects", tags=["Projects"])
    app.include_router(agents.router, prefix="/agents", tags=["Agents"])
    app.include_router(builders.router, prefix="/builders", tags=["Builders"])
    app.include_router(favorites.router, prefix="/favorites", tags=["Favorites"])

    # Messaging
    app.include_router(inquiries.router, prefix="/inquiries", tags=["Inquiries"])
    app.include_router(contact.router, prefix="/contact", tags=["Contact"])
    app.include_router(notifications.router, prefix="/notifications", tags=["Notifications"])
    app.include_router(newsletter.router, prefix="/newsletter", tags=["Newsletter"])

    # Memberships & payments
    app.include_router(memberships.router, prefix="/memberships", tags=["Memberships"])
    app.include_router(payments.router, prefix="/payments", tags=["Payments"])
    app.include_router(webhooks.router, prefix="/webhooks", tags=["Webhooks"])

    # Uploads and public site content
    app.include_router(upload.router, prefix="/upload", tags=["Upload"])
    app.include_router(content.router, prefix="/content", tags=["Content"])

    # Admin panel (all endpoints gated by get_current_admin dependency inside the router)
    app.include_router(admin.router, prefix="/admin", tags=["Admin"])
    app.include_router(admin_content.router, prefix="/admin", tags=["Admin Content"])

    # ── Health Check ──────────────────────────────────────────────────────────
    app.include_router(health.router, tags=["Health"])

    logger.info("Application configured", extra={"environment": settings.environment})
    return app


app = create_app()
