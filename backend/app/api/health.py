"""Health check endpoint for infrastructure status."""

import logging
from typing import Literal

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


class HealthStatus(BaseModel):
    """Health check response."""

    status: Literal["ok", "down"]
    checks: dict[str, Literal["ok", "down"]]


def get_health(session: Session) -> HealthStatus:
    """
    Check health of core infrastructure components.

    Checks:
    - Database: Attempts to execute SELECT 1

    Returns:
        HealthStatus with overall status and individual check results
    """
    checks: dict[str, Literal["ok", "down"]] = {}

    # Check database
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

    return HealthStatus(status=overall_status, checks=checks)
