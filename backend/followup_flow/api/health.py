"""Health check and metrics endpoints."""

from fastapi import APIRouter, Depends, Response
from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from sqlalchemy import text

from followup_flow.api.deps import get_text_generator
from followup_flow.config import settings
from followup_flow.schemas.common import HealthResponse
from followup_flow.services.gamification import get_redis

router = APIRouter(tags=["health"])

# Prometheus metrics
PROSPECTS_CREATED = Counter("prospects_created_total", "Total prospects created")
FOLLOW_UPS_CLOSED = Counter("follow_ups_closed_total", "Follow-ups that left Pending", ["status"])
SUGGESTION_REQUESTS = Counter("suggestion_requests_total", "AI suggestion requests", ["flow"])
ERRORS = Counter("errors_total", "Total errors", ["type"])


@router.get("/health", response_model=HealthResponse)
async def health_check(generator=Depends(get_text_generator)):
    """Health check endpoint."""
    storage_status = "memory"
    gamification_status = "memory"

    if settings.storage_backend == "sql":
        from followup_flow.database import async_session
        try:
            async with async_session() as session:
                await session.execute(text("SELECT 1"))
            storage_status = "ok"
        except Exception:
            storage_status = "error"

    if settings.gamification_backend == "redis":
        try:
            get_redis().ping()
            gamification_status = "ok"
        except Exception:
            gamification_status = "error"

    generation_status = "configured" if generator.is_configured else "disabled"
    overall = "healthy" if "error" not in (storage_status, gamification_status) else "degraded"

    return HealthResponse(
        status=overall,
        storage=storage_status,
        gamification=gamification_status,
        text_generation=generation_status,
    )


@router.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
