"""
Adds browser hardening headers to every response.

Usage:
    app.middleware("http")(security_headers_middleware)
"""
from fastapi import Request, Response

from app.config import settings

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "X-XSS-Protection": "1; mode=block",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=(self)",
}

HSTS_VALUE = "max-age=63072000; includeSubDomains; preload"


async def security_headers_middleware(request: Request, call_next) -> Response:
    response: Response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    # Only meaningful behind HTTPS
    if settings.is_production:
        response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
    return response
