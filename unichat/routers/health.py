import logging

from fastapi import APIRouter
from unichat.models.schemas import HealthResponse
from unichat.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Return service health.  If the DB isn't ready yet (e.g. during
    container startup before lifespan runs), return a 200 with
    status="starting" so container healthchecks don't fail."""
    try:
        async with get_db() as db:
            await db.execute("SELECT COUNT(*) FROM usage_counters")
        return HealthResponse(status="healthy")
    except Exception as exc:
        logger.warning("Health check: DB not ready yet (%s)", exc)
        return HealthResponse(status="starting")
