"""FastAPI dependencies."""
import logging
from typing import Optional

from fastapi import Depends
from fastapi.requests import HTTPConnection
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.db.database import get_db
from app.graphql.context import GraphQLContext
from app.services.notifications.bus import get_notification_bus
from app.services.ordering.models import Caller
from app.services.persistence.users import UserRepository

logger = logging.getLogger(__name__)


async def get_caller(
    connection: HTTPConnection,
    db: AsyncSession = Depends(get_db),
) -> Optional[Caller]:
    """Resolve the caller from the identity header set by the gateway."""
    raw_user_id = connection.headers.get(settings.identity_header)
    if not raw_user_id:
        return None
    try:
        user_id = int(raw_user_id)
    except ValueError:
        logger.warning(f"[AUTH] Ignoring malformed {settings.identity_header}: {raw_user_id!r}")
        return None

    caller = await UserRepository(db).get_caller(user_id)
    if caller is None:
        logger.warning(f"[AUTH] Unknown user id {user_id}")
    return caller


async def get_graphql_context(
    db: AsyncSession = Depends(get_db),
    caller: Optional[Caller] = Depends(get_caller),
) -> GraphQLContext:
    """Get GraphQL context instance."""
    return GraphQLContext(db=db, bus=get_notification_bus(), caller=caller)
