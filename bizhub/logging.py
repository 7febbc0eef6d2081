"""
BizHub logging.

Modules log through ``get_logger(__name__)``. Ids and free text that
arrive from requests go through the sanitize helpers first.
"""

import logging
import os
import sys
from functools import cache

# Supabase SDK traffic (httpx, postgrest, storage3) only matters when it fails
_QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "postgrest", "storage3")


def _formatter() -> logging.Formatter:
    # Vercel stamps each line itself
    if os.environ.get("VERCEL") == "1":
        return logging.Formatter("%(levelname)s - %(name)s - %(message)s")
    return logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")


def _setup() -> None:
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_formatter())
    root.setLevel(level)
    root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


_setup()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _strip_line_breaks(value: str) -> str:
    """Keep request data from starting a forged log line."""
    return value.replace("\r", "\\r").replace("\n", "\\n").replace("\t", "\\t").replace("\x00", "")


def sanitize_id_for_logging(id_value: str | None) -> str:
    """First 8 characters of an id, enough to correlate UUIDs; "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _strip_line_breaks(str(id_value))[:8]


def sanitize_string_for_logging(value: str | None, max_length: int = 50) -> str:
    """Escaped free text (emails, file names), cut at max_length."""
    if not value:
        return "N/A"
    safe_value = _strip_line_breaks(str(value))
    if len(safe_value) > max_length:
        return safe_value[:max_length] + "..."
    return safe_value
