"""Category Repository."""
from bizhub.services.models import Category

from .base import BaseRepository


class CategoryRepository(BaseRepository):
    """Read-only category operations."""

    table = "categories"

    async def get_ordered(self, limit: int = 8) -> list[Category]:
        """Categories by display order, ascending."""
        result = (
            await self._query()
            .select("*")
            .order("order", desc=False)
            .limit(limit)
            .execute()
        )
        return [Category(**c) for c in result.data]

    async def get_by_id(self, category_id: str) -> Category | None:
        result = await self._query().select("*").eq("id", category_id).execute()
        return Category(**result.data[0]) if result.data else None
