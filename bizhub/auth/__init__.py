"""Authentication package."""
from .dependencies import get_db, get_request_context, get_session
from .session import (
    SESSION_COOKIE,
    extract_access_token,
    login_redirect_url,
    safe_return_url,
    sign_in,
    verify_access_token,
)

__all__ = [
    "SESSION_COOKIE",
    "extract_access_token",
    "get_db",
    "get_request_context",
    "get_session",
    "login_redirect_url",
    "safe_return_url",
    "sign_in",
    "verify_access_token",
]
