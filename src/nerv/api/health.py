"""Health check endpoint.

Learn: Simple GET endpoint that verifies the server is running and the
database is reachable.
"""

from datetime import datetime, timezone

import structlog
from fastapi import APIRouter, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from nerv import __version__

logger = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Check server health and database connectivity."""
    checks = {"server": "ok", "version": __version__}

    try:
        async with request.app.state.db.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except SQLAlchemyError as e:
        logger.warning("health.database_unreachable", error=str(e))
        checks["database"] = "error"

    status = "UP" if checks["database"] == "ok" else "DEGRADED"
    return {
        "status": status,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        **checks,
    }
