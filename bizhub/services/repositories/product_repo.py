"""Product Repository - per-business catalog operations."""
from typing import Any, Dict, List, Optional

from bizhub.services.models import Product

from .base import BaseRepository


class ProductRepository(BaseRepository):
    """Product database operations."""

    table = "products"

    async def get_by_business(self, business_id: str, active_only: bool = False) -> List[Product]:
        """All products of a business (in service order)."""
        query = self._query().select("*").eq("business_id", business_id)
        if active_only:
            query = query.eq("is_active", True)
        result = await query.execute()
        return [Product(**p) for p in result.data]

    async def get_by_id(self, product_id: str) -> Optional[Product]:
        result = await self._query().select("*").eq("id", product_id).execute()
        return Product(**result.data[0]) if result.data else None

    async def create(self, data: Dict[str, Any]) -> Product:
        result = await self._query().insert(data).execute()
        return Product(**result.data[0])

    async def update(self, product_id: str, data: Dict[str, Any]) -> Optional[Product]:
        result = await self._query().update(data).eq("id", product_id).execute()
        return Product(**result.data[0]) if result.data else None

    async def delete(self, product_id: str) -> None:
        await self._query().delete().eq("id", product_id).execute()
