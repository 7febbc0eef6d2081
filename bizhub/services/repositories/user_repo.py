"""User Repository - profile rows from the public users table."""
from typing import Optional

from bizhub.services.models import AppUser

from .base import BaseRepository


class UserRepository(BaseRepository):
    """User profile operations."""

    table = "users"

    async def get_by_id(self, user_id: str) -> Optional[AppUser]:
        result = await self._query().select("*").eq("id", user_id).execute()
        return AppUser(**result.data[0]) if result.data else None
