"""Business Repository - directory listings."""
from typing import Optional

from bizhub.services.models import Business

from .base import BaseRepository

APPROVED = "approved"


class BusinessRepository(BaseRepository):
    """Business listing operations."""

    table = "businesses"

    async def get_approved(self, limit: int = 6, category_id: Optional[str] = None) -> list[Business]:
        """Approved businesses, optionally restricted to one category."""
        query = self._query().select("*").eq("status", APPROVED)
        if category_id:
            query = query.eq("category_id", category_id)
        result = await query.limit(limit).execute()
        return [Business(**b) for b in result.data]

    async def get_by_id(self, business_id: str) -> Optional[Business]:
        result = await self._query().select("*").eq("id", business_id).execute()
        return Business(**result.data[0]) if result.data else None

    async def get_by_owner(self, owner_id: str) -> list[Business]:
        """Businesses owned by a user, any status."""
        result = await self._query().select("*").eq("owner_id", owner_id).execute()
        return [Business(**b) for b in result.data]
