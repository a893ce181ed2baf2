"""
Health Check Router - Scientific Productivity Scoring
app/routers/health.py

Returns health status of the configured dependencies with real connection
checks. Dependencies that are switched off in settings report "disabled".
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from app.config import settings

router = APIRouter(tags=["Health"])

DISABLED = "disabled"



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    activity_backend: str
    dependencies: Dict[str, str]



#  Dependency Health Checks


def _short(error: Exception) -> str:
    msg = str(error)
    return msg[:100] + "..." if len(msg) > 100 else msg


async def check_snowflake() -> str:
    """Check Snowflake connection health."""
    if settings.ACTIVITY_BACKEND != "snowflake":
        return DISABLED
    try:
        from app.services.snowflake import get_snowflake_connection

        conn = get_snowflake_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT CURRENT_USER(), CURRENT_ROLE()")
        result = cursor.fetchone()
        cursor.close()
        conn.close()

        return f"healthy (User: {result[0]})"

    except Exception as e:
        return f"unhealthy: {_short(e)}"


async def check_redis() -> str:
    """Check Redis connection health."""
    if not settings.SCORE_CACHE_ENABLED:
        return DISABLED
    try:
        import redis

        client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=5,
        )
        client.ping()
        client.close()
        return "healthy"

    except Exception as e:
        return f"unhealthy: {_short(e)}"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All enabled dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
)
async def health_check():
    """Check health of all enabled dependencies."""
    dependencies = {
        "snowflake": await check_snowflake(),
        "redis": await check_redis(),
    }

    all_healthy = all(
        v == DISABLED or v.startswith("healthy") for v in dependencies.values()
    )

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        activity_backend=settings.ACTIVITY_BACKEND,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
