"""FastAPI dependencies for the request context.

The session is resolved at most once per request and cached on
``request.state``; several dependencies of the same route share it.
"""
from typing import Optional

from fastapi import Cookie, Depends, Header, Request

from bizhub.services.database import Database, get_database_async
from bizhub.services.models import RequestContext, Session
from bizhub.web.theme import THEME_COOKIE, resolve_theme

from .session import SESSION_COOKIE, extract_access_token, verify_access_token


async def get_db() -> Database:
    return await get_database_async()


async def get_session(
    request: Request,
    authorization: Optional[str] = Header(None, alias="Authorization"),
    access_token: Optional[str] = Cookie(None, alias=SESSION_COOKIE),
    db: Database = Depends(get_db),
) -> Optional[Session]:
    """Current session or None. Never raises for bad tokens."""
    if hasattr(request.state, "session"):
        return request.state.session

    token = extract_access_token(authorization, access_token)
    session = await verify_access_token(db, token)
    request.state.session = session
    return session


async def get_request_context(
    session: Optional[Session] = Depends(get_session),
    theme: Optional[str] = Cookie(None, alias=THEME_COOKIE),
) -> RequestContext:
    """
    Fresh context per request.

    Routes fill in business_id / editing_product_id from their own
    parameters.
    """
    return RequestContext(session=session, theme=resolve_theme(theme))
