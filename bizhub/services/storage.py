"""Image uploads to the Supabase Storage bucket."""
import inspect
import re
import time
from typing import Optional

from supabase._async.client import AsyncClient

from bizhub.logging import get_logger, sanitize_string_for_logging
from bizhub.services.models import ImageUpload
from bizhub.settings import STORAGE_BUCKET

logger = get_logger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9.]")


def safe_filename(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9.] with an underscore."""
    return _UNSAFE_FILENAME_CHARS.sub("_", name)


def product_image_path(business_id: str, filename: str, timestamp_ms: Optional[int] = None) -> str:
    """Storage key: products/<business_id>/<ms timestamp>_<safe name>."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"products/{business_id}/{timestamp_ms}_{safe_filename(filename)}"


class ImageStorage:
    """Uploads files and resolves their public URLs."""

    def __init__(self, client: AsyncClient, bucket: str = STORAGE_BUCKET):
        self.client = client
        self.bucket = bucket

    async def upload_product_image(self, business_id: str, image: ImageUpload) -> Optional[str]:
        """
        Upload one product image and return its public URL.

        A failed upload is logged and yields None so the remaining
        images of the same form submission still go through.
        """
        path = product_image_path(business_id, image.filename)
        try:
            bucket = self.client.storage.from_(self.bucket)
            await bucket.upload(path, image.content, {"content-type": image.content_type})

            public_url = bucket.get_public_url(path)
            # storage3 made get_public_url a coroutine on the async client
            if inspect.isawaitable(public_url):
                public_url = await public_url
            return public_url
        except Exception as e:
            logger.error(
                f"Error uploading image {sanitize_string_for_logging(image.filename)}: {e}",
                exc_info=True,
            )
            return None
