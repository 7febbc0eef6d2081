"""Supabase session bridge: access tokens to Session objects."""
from typing import Optional
from urllib.parse import quote, urlsplit

from bizhub.errors import ERROR_LOGIN_FAILED, AuthRequiredError
from bizhub.logging import get_logger, sanitize_string_for_logging
from bizhub.services.models import Session

logger = get_logger(__name__)

SESSION_COOKIE = "sb-access-token"
LOGIN_PATH = "/login"


def extract_access_token(authorization: Optional[str], cookie_token: Optional[str]) -> Optional[str]:
    """Bearer header wins over the session cookie."""
    if authorization:
        parts = authorization.split(" ")
        if len(parts) == 2 and parts[0].lower() == "bearer" and parts[1]:
            return parts[1]
    return cookie_token or None


async def verify_access_token(db, token: Optional[str]) -> Optional[Session]:
    """
    Resolve a Supabase access token to a Session.

    Invalid or expired tokens mean "not signed in", not an error page.
    """
    if not token:
        return None
    try:
        response = await db.client.auth.get_user(token)
    except Exception as e:
        logger.warning(f"Rejected access token: {e}")
        return None

    user = getattr(response, "user", None)
    if user is None:
        return None
    return Session(user_id=str(user.id), email=getattr(user, "email", None), access_token=token)


async def sign_in(db, email: str, password: str) -> Session:
    """Password sign-in through the anon-key client."""
    try:
        response = await db.auth_client.auth.sign_in_with_password({"email": email, "password": password})
    except Exception as e:
        logger.info(f"Sign-in failed for {sanitize_string_for_logging(email)}: {e}")
        raise AuthRequiredError(ERROR_LOGIN_FAILED) from e

    if response.session is None or response.user is None:
        raise AuthRequiredError(ERROR_LOGIN_FAILED)

    return Session(
        user_id=str(response.user.id),
        email=response.user.email,
        access_token=response.session.access_token,
    )


def safe_return_url(url: Optional[str], default: str = "/") -> str:
    """Only same-site relative paths are followed after login."""
    if not url:
        return default
    parts = urlsplit(url)
    if parts.scheme or parts.netloc or not url.startswith("/") or url.startswith("//"):
        return default
    # Browsers read /\host as //host
    if "\\" in url:
        return default
    return url


def login_redirect_url(return_url: Optional[str] = None) -> str:
    """Login view URL carrying the page to come back to."""
    if not return_url:
        return LOGIN_PATH
    return f"{LOGIN_PATH}?returnUrl={quote(return_url, safe='')}"
