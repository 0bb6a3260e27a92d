"""
Health check for load balancers and Docker. 503 when the database is unreachable.
"""
import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Response
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()

STARTED_AT = time.monotonic()


def check_database(db: Session) -> dict:
    start = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return {"status": "down", "latency_ms": None}
    return {"status": "up", "latency_ms": round((time.perf_counter() - start) * 1000, 2)}


@router.get("/health")
def health_check(response: Response, db: Session = Depends(get_db)):
    database = check_database(db)
    healthy = database["status"] == "up"
    if not healthy:
        response.status_code = 503

    return {
        "status": "healthy" if healthy else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.app_version,
        "uptime": round(time.monotonic() - STARTED_AT, 1),
        "checks": {"database": database},
    }


@router.head("/health")
def health_head(db: Session = Depends(get_db)):
    """Liveness check without a body."""
    healthy = check_database(db)["status"] == "up"
    return Response(status_code=200 if healthy else 503)
