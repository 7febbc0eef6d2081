"""
Catalog Domain Service

Read-only listing queries behind the homepage, browse page and
business detail page.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from bizhub.errors import (
    ERROR_BUSINESS_NOT_FOUND,
    ERROR_LOADING_BUSINESSES,
    ERROR_LOADING_CATEGORIES,
    ERROR_LOADING_PRODUCTS,
    RemoteCallError,
)
from bizhub.logging import get_logger, sanitize_id_for_logging
from bizhub.services.models import Business, Category, Product
from bizhub.services.repositories import (
    REMOTE_ERRORS,
    BusinessRepository,
    CategoryRepository,
    ProductRepository,
)
from bizhub.services.repositories.business_repo import APPROVED

logger = get_logger(__name__)

FEATURED_LIMIT = 6
CATEGORY_LIMIT = 8
BROWSE_LIMIT = 50


@dataclass
class BusinessDetail:
    """A business with its active products."""
    business: Business
    products: List[Product] = field(default_factory=list)


class CatalogService:
    """Listing and category queries."""

    def __init__(
        self,
        businesses: BusinessRepository,
        categories: CategoryRepository,
        products: ProductRepository,
    ):
        self.businesses = businesses
        self.categories = categories
        self.products = products

    async def featured_businesses(self, limit: int = FEATURED_LIMIT) -> List[Business]:
        """Approved businesses for the homepage grid."""
        try:
            return await self.businesses.get_approved(limit=limit)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading businesses: {e}")
            raise RemoteCallError(ERROR_LOADING_BUSINESSES) from e

    async def list_categories(self, limit: int = CATEGORY_LIMIT) -> List[Category]:
        """Categories in display order."""
        try:
            return await self.categories.get_ordered(limit=limit)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading categories: {e}")
            raise RemoteCallError(ERROR_LOADING_CATEGORIES) from e

    async def browse(self, category_id: Optional[str] = None) -> tuple[Optional[Category], List[Business]]:
        """Approved businesses, narrowed to a category when one is given."""
        try:
            category = await self.categories.get_by_id(category_id) if category_id else None
            businesses = await self.businesses.get_approved(limit=BROWSE_LIMIT, category_id=category_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error browsing category {sanitize_id_for_logging(category_id)}: {e}")
            raise RemoteCallError(ERROR_LOADING_BUSINESSES) from e
        return category, businesses

    async def business_detail(self, business_id: str, viewer_id: Optional[str] = None) -> Optional[BusinessDetail]:
        """
        Business and its active products.

        None when the id is unknown, and for businesses that are not approved
        unless the viewer owns them (owners preview pending listings).
        """
        try:
            business = await self.businesses.get_by_id(business_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading business {sanitize_id_for_logging(business_id)}: {e}")
            raise RemoteCallError(ERROR_BUSINESS_NOT_FOUND) from e

        if business is None:
            return None
        if business.status != APPROVED and (viewer_id is None or business.owner_id != viewer_id):
            logger.info(f"Business {sanitize_id_for_logging(business_id)} is {business.status}, hidden from viewer")
            return None

        try:
            products = await self.products.get_by_business(business_id, active_only=True)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading products for {sanitize_id_for_logging(business_id)}: {e}")
            raise RemoteCallError(ERROR_LOADING_PRODUCTS) from e

        return BusinessDetail(business=business, products=products)

    async def owned_businesses(self, owner_id: str) -> List[Business]:
        """Businesses listed on the owner's dashboard."""
        try:
            return await self.businesses.get_by_owner(owner_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading dashboard for {sanitize_id_for_logging(owner_id)}: {e}")
            raise RemoteCallError(ERROR_LOADING_BUSINESSES) from e
