"""Health check endpoint."""
import logging
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_db
from app.services.notifications.bus import get_notification_bus
from app.services.notifications.topics import TOPICS

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check(request: Request, db: AsyncSession = Depends(get_db)):
    """Report database reachability and open subscriptions per topic."""
    logger.debug(
        f"[HEALTH] Health check requested - Client: {request.client.host if request.client else 'unknown'}"
    )
    bus = get_notification_bus()
    subscriptions = {topic: bus.subscriber_count(topic) for topic in TOPICS}

    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"[HEALTH] Database unreachable - Error: {type(e).__name__}: {str(e)}")
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "database": "unreachable", "subscriptions": subscriptions},
        )

    return {"status": "healthy", "database": "ok", "subscriptions": subscriptions}
