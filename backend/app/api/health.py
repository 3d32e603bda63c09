"""Health check endpoint for infrastructure status."""

import logging
from datetime import UTC, datetime
from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from backend.app.db.session import get_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["ok", "down"]
    timestamp: datetime
    checks: dict[str, Literal["ok", "down"]]


@router.get("/health", response_model=HealthStatus)
def get_health(session: Session = Depends(get_session)) -> HealthStatus:
    """
    Check health of core infrastructure components.

    Checks:
    - Database: Attempts to execute SELECT 1

    Returns:
        HealthStatus with overall status and individual check results
    """
    checks: dict[str, Literal["ok", "down"]] = {}

    try:
        session.execute(text("SELECT 1"))
        checks["db"] = "ok"
    except SQLAlchemyError as e:
        logger.error("Database health check failed: %s", e)
        checks["db"] = "down"

    # Overall status - down if any check is down
    overall_status: Literal["ok", "down"] = (
        "ok" if all(status == "ok" for status in checks.values()) else "down"
    )

    return HealthStatus(
        status=overall_status, timestamp=datetime.now(UTC), checks=checks
    )
