"""
Health Check Routes
===================

Liveness and readiness probes. No incident logic.
"""

from datetime import datetime, UTC

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse

from app.db.session import check_database_connection

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    summary="Health Check",
    description="Returns service status, current time and database connectivity.",
)
def health_check(request: Request):
    db_healthy = check_database_connection(request.app.state.engine)
    settings = request.app.state.settings

    return {
        "status": "ok" if db_healthy else "degraded",
        "timestamp": datetime.now(UTC).isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "checks": {
            "database": "healthy" if db_healthy else "unhealthy",
        },
    }


@router.get(
    "/ready",
    summary="Readiness Check",
    description="200 when the service can serve requests, 503 otherwise.",
)
def readiness_check(request: Request):
    if not check_database_connection(request.app.state.engine):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )

    return {"status": "ready"}
