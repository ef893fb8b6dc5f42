"""
Health Check Router - Mentor Reputation Service
mentor_reputation/routers/health.py

Returns health status of Snowflake and Redis with real connection checks.
Redis is optional: the service degrades to uncached reads and process-local
mentor locks without it, so an unreachable Redis reports "degraded".
"""
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from typing import Dict
from datetime import datetime, timezone

from mentor_reputation.config import settings
from mentor_reputation.services.cache import get_cache
from mentor_reputation.services.snowflake import get_snowflake_connection

router = APIRouter(tags=["Health"])



#  Schemas


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    dependencies: Dict[str, str]



#  Dependency Health Checks


def _short(e: Exception) -> str:
    msg = str(e)
    return msg[:100] + "..." if len(msg) > 100 else msg


def check_snowflake() -> str:
    """Check Snowflake connection health."""
    missing = [
        name for name in ("SNOWFLAKE_ACCOUNT", "SNOWFLAKE_USER", "SNOWFLAKE_PASSWORD")
        if not getattr(settings, name)
    ]
    if missing:
        return f"unhealthy: Missing settings: {', '.join(missing)}"

    try:
        conn = get_snowflake_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("SELECT CURRENT_USER()")
            result = cursor.fetchone()
            cursor.close()
        finally:
            conn.close()
        return f"healthy (User: {result[0]})"
    except Exception as e:
        return f"unhealthy: {_short(e)}"


def check_redis() -> str:
    """Check Redis connection health."""
    cache = get_cache()
    if cache is None:
        return "unhealthy: Redis not configured or unreachable"
    try:
        cache.ping()
        return "healthy"
    except Exception as e:
        return f"unhealthy: {_short(e)}"



#  Main Health Check Route


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={
        200: {"description": "All dependencies healthy"},
        503: {"description": "One or more dependencies unhealthy"},
    },
    summary="Health check",
    description="Check health of all dependencies.",
)
def health_check():
    dependencies = {
        "snowflake": check_snowflake(),
        "redis": check_redis(),
    }

    all_healthy = all(v.startswith("healthy") for v in dependencies.values())

    response = HealthResponse(
        status="healthy" if all_healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        version=settings.APP_VERSION,
        dependencies=dependencies,
    )

    if all_healthy:
        return response
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=response.model_dump(mode="json"),
    )
