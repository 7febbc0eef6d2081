"""
Shared helpers for page routers.

Page rendering (navbar + notice + layout) and redirects that carry a
notice across to the next page.
"""
from typing import Optional
from urllib.parse import urlsplit

from fastapi import Request
from fastapi.responses import HTMLResponse, RedirectResponse

from bizhub.services.database import Database
from bizhub.services.models import RequestContext
from bizhub.web.notices import NOTICE_COOKIE, Notice, NoticeType, clear_notice, read_notice, set_notice
from bizhub.web.render import layout, navbar


def current_url(request: Request) -> str:
    """Path and query of the request, for return targets."""
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def referer_path(request: Request) -> Optional[str]:
    """Path and query of the Referer header, if any."""
    referer = request.headers.get("referer")
    if not referer:
        return None
    parts = urlsplit(referer)
    if not parts.path:
        return None
    return f"{parts.path}?{parts.query}" if parts.query else parts.path


def redirect(url: str, message: Optional[str] = None, type: NoticeType = NoticeType.INFO) -> RedirectResponse:
    """303 redirect, optionally with a notice for the next page."""
    response = RedirectResponse(url, status_code=303)
    if message:
        set_notice(response, message, type)
    return response


async def render_page(
    request: Request,
    db: Database,
    ctx: RequestContext,
    title: str,
    body: str,
    status_code: int = 200,
    notice: Optional[Notice] = None,
) -> HTMLResponse:
    """
    Wrap a page body in the layout.

    A notice passed in wins over one carried by the notice cookie; the
    cookie is cleared whenever it was present.
    """
    display_name = await db.users.display_name(ctx.session) if ctx.session else None
    cookie_notice = read_notice(request.cookies.get(NOTICE_COOKIE))

    nav = navbar(ctx.session, display_name, ctx.theme, current_url(request))
    html = layout(title, body, nav, ctx.theme, notice or cookie_notice)

    response = HTMLResponse(html, status_code=status_code)
    if NOTICE_COOKIE in request.cookies:
        clear_notice(response)
    return response
