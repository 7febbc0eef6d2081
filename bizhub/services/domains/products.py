"""
Product Manager Domain Service

Per-business product CRUD for the business owner. Every operation
starts with the ownership check, so a non-owner never reaches a
products-table mutation.
"""
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from bizhub.errors import (
    ERROR_BUSINESS_NOT_FOUND,
    ERROR_DELETING_PRODUCT,
    ERROR_LOADING_PRODUCT,
    ERROR_LOADING_PRODUCTS,
    ERROR_PRODUCT_NOT_FOUND,
    ERROR_SAVING_PRODUCT,
    ERROR_UNAUTHORIZED,
    AuthRequiredError,
    BizHubError,
    OwnershipError,
    RemoteCallError,
    ValidationError,
)
from bizhub.logging import get_logger, sanitize_id_for_logging
from bizhub.services.models import Business, ImageUpload, Product, ProductForm, RequestContext
from bizhub.services.repositories import REMOTE_ERRORS, BusinessRepository, ProductRepository
from bizhub.services.storage import ImageStorage

logger = get_logger(__name__)

MAX_IMAGES_PER_PRODUCT = 3


@dataclass
class ManagerView:
    """Product manager page data for one owned business."""
    business: Business
    products: List[Product] = field(default_factory=list)
    editing: Optional[Product] = None
    products_error: Optional[str] = None
    edit_error: Optional[str] = None


def parse_price(raw: Optional[str]) -> Optional[Decimal]:
    """Form price to Decimal; blank, invalid, non-finite or zero gives None."""
    if raw is None:
        return None
    try:
        price = Decimal(raw.strip())
    except (InvalidOperation, AttributeError):
        return None
    if not price.is_finite() or price == 0:
        return None
    return price


class ProductManager:
    """Owner-only product operations for one business per request."""

    def __init__(
        self,
        businesses: BusinessRepository,
        products: ProductRepository,
        storage: ImageStorage,
    ):
        self.businesses = businesses
        self.products = products
        self.storage = storage

    async def verify_ownership(self, ctx: RequestContext) -> Business:
        """
        Return the context's business if the session user owns it.

        Raises:
            AuthRequiredError: no session
            OwnershipError: business missing, unreadable or owned by someone else
        """
        if ctx.session is None:
            raise AuthRequiredError()

        try:
            business = await self.businesses.get_by_id(ctx.business_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Ownership verification failed for {sanitize_id_for_logging(ctx.business_id)}: {e}")
            raise OwnershipError(ERROR_BUSINESS_NOT_FOUND, ctx.business_id, ctx.user_id) from e

        if business is None:
            logger.warning(f"Ownership verification failed: business {sanitize_id_for_logging(ctx.business_id)} not found")
            raise OwnershipError(ERROR_BUSINESS_NOT_FOUND, ctx.business_id, ctx.user_id)

        if business.owner_id != ctx.user_id:
            logger.warning(
                f"Ownership verification failed: user {sanitize_id_for_logging(ctx.user_id)} "
                f"does not own {sanitize_id_for_logging(ctx.business_id)}"
            )
            raise OwnershipError(ERROR_UNAUTHORIZED, ctx.business_id, ctx.user_id)

        return business

    # The helpers below assume verify_ownership already passed for business_id

    async def _business_products(self, business_id: str) -> List[Product]:
        try:
            return await self.products.get_by_business(business_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading products: {e}")
            raise RemoteCallError(ERROR_LOADING_PRODUCTS) from e

    async def _business_product(self, business_id: str, product_id: str) -> Product:
        try:
            product = await self.products.get_by_id(product_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error loading product {sanitize_id_for_logging(product_id)}: {e}")
            raise RemoteCallError(ERROR_LOADING_PRODUCT) from e

        if product is None or product.business_id != business_id:
            raise ValidationError(ERROR_PRODUCT_NOT_FOUND)
        return product

    async def list_products(self, ctx: RequestContext) -> List[Product]:
        await self.verify_ownership(ctx)
        return await self._business_products(ctx.business_id)

    async def open_manager(self, ctx: RequestContext, edit_product_id: Optional[str] = None) -> ManagerView:
        """
        Everything the product manager page shows, behind one ownership check.

        Loading failures for the product list or the edited product are
        reported on the view; only the ownership check raises.
        """
        business = await self.verify_ownership(ctx)
        view = ManagerView(business=business)

        if edit_product_id:
            try:
                view.editing = await self._business_product(business.id, edit_product_id)
                ctx.editing_product_id = view.editing.id
            except BizHubError as e:
                logger.warning(f"Cannot open product editor: {e.message}")
                view.edit_error = ERROR_LOADING_PRODUCT

        try:
            view.products = await self._business_products(business.id)
        except RemoteCallError as e:
            view.products_error = e.message

        return view

    async def upload_images(self, business_id: str, images: List[ImageUpload]) -> List[str]:
        """Upload up to three images; failed uploads are skipped."""
        urls = []
        for image in images[:MAX_IMAGES_PER_PRODUCT]:
            url = await self.storage.upload_product_image(business_id, image)
            if url:
                urls.append(url)
        return urls

    def _build_payload(self, ctx: RequestContext, form: ProductForm, image_urls: List[str]) -> Dict[str, Any]:
        price = parse_price(form.price)
        data: Dict[str, Any] = {
            "name": form.name,
            "description": form.description,
            "price": float(price) if price is not None else None,
            "business_id": ctx.business_id,
            "is_active": True,
            "updated_at": datetime.now(UTC).isoformat(),
        }
        if image_urls:
            data["images"] = image_urls
        return data

    async def save_product(
        self,
        ctx: RequestContext,
        form: ProductForm,
        images: Optional[List[ImageUpload]] = None,
    ) -> Product:
        """
        Create a product, or update ``ctx.editing_product_id`` when set.

        Existing images are kept on update unless new ones were uploaded.
        """
        await self.verify_ownership(ctx)

        if ctx.editing_product_id:
            # Refuses ids that belong to another business
            await self._business_product(ctx.business_id, ctx.editing_product_id)

        image_urls = await self.upload_images(ctx.business_id, images or [])
        data = self._build_payload(ctx, form, image_urls)

        try:
            if ctx.editing_product_id:
                product = await self.products.update(ctx.editing_product_id, data)
                if product is None:
                    raise ValidationError(ERROR_PRODUCT_NOT_FOUND)
                logger.info(f"Product {sanitize_id_for_logging(product.id)} updated")
                return product

            data["created_at"] = data["updated_at"]
            product = await self.products.create(data)
            logger.info(f"Product {sanitize_id_for_logging(product.id)} created for {sanitize_id_for_logging(ctx.business_id)}")
            return product
        except REMOTE_ERRORS as e:
            logger.error(f"Error saving product: {e}")
            raise RemoteCallError(ERROR_SAVING_PRODUCT) from e

    async def delete_product(self, ctx: RequestContext, product_id: str) -> None:
        await self.verify_ownership(ctx)
        await self._business_product(ctx.business_id, product_id)
        try:
            await self.products.delete(product_id)
        except REMOTE_ERRORS as e:
            logger.error(f"Error deleting product {sanitize_id_for_logging(product_id)}: {e}")
            raise RemoteCallError(ERROR_DELETING_PRODUCT) from e
        logger.info(f"Product {sanitize_id_for_logging(product_id)} deleted")
