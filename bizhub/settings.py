"""Environment-driven settings shared by several modules."""
import os

STORAGE_BUCKET = os.environ.get("STORAGE_BUCKET", "images")

# Send cookies over HTTPS only (enable in production)
COOKIE_SECURE = os.environ.get("COOKIE_SECURE", "false").lower() in ("1", "true", "yes")
