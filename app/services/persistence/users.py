"""User persistence service."""
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.models import User
from app.services.ordering.models import Caller
from app.services.ordering.statuses import UserRole


class UserRepository:
    """Repository for resolving callers."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_caller(self, user_id: int) -> Optional[Caller]:
        """Resolve a user id to the caller identity used by order operations."""
        user = await self.get_user_by_id(user_id)
        if user is None:
            return None
        return Caller(id=user.id, role=UserRole(user.role))
