import structlog
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from lens.api.schemas import EntitlementResponse
from lens.core.config import has_api_key
from lens.db.redis import get_redis

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/health")
async def health_check():
    return {"status": "healthy", "service": "solopreneur-lens"}


@router.get("/ready")
async def readiness_check():
    """Readiness check: Redis backs saved preferences, generation works without it."""
    checks = {"redis": False}
    try:
        await get_redis().ping()
        checks["redis"] = True
    except Exception as e:
        logger.warning("redis_health_check_failed", error=str(e), error_type=type(e).__name__)

    return JSONResponse(
        status_code=200 if all(checks.values()) else 503,
        content={"status": "ready" if all(checks.values()) else "degraded", "checks": checks},
    )


@router.get("/entitlement", response_model=EntitlementResponse)
async def entitlement() -> EntitlementResponse:
    """Whether a usable Gemini key is currently selected; the shell gates generation on this."""
    return EntitlementResponse(has_api_key=has_api_key())
