"""
Public Pages Router

Homepage (featured businesses + categories), browse, business detail
and the owner dashboard.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request

from bizhub.auth import get_db, get_request_context, login_redirect_url
from bizhub.errors import ERROR_BUSINESS_NOT_FOUND, ERROR_LOADING_BUSINESSES, RemoteCallError
from bizhub.services.database import Database
from bizhub.services.models import RequestContext
from bizhub.web import render
from bizhub.web.notices import NoticeType

from .deps import current_url, redirect, render_page

router = APIRouter(tags=["pages"])


@router.get("/")
@router.get("/index.html")
async def home(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Homepage: approved businesses and the category grid."""
    try:
        businesses = await db.catalog.featured_businesses()
        featured = render.grid(
            (render.business_card(b) for b in businesses),
            "featuredGrid",
            "No businesses yet. Be the first to register!",
        )
    except RemoteCallError as e:
        featured = render.grid_error("featuredGrid", e.message)

    try:
        categories = await db.catalog.list_categories()
    except RemoteCallError:
        # Already logged; the grid just stays empty
        categories = []
    category_grid = '<div id="categoriesGrid" class="grid">{}</div>'.format(
        "".join(render.category_card(c) for c in categories)
    )

    return await render_page(request, db, ctx, "Home", render.home_body(featured, category_grid))


@router.get("/browse")
async def browse(
    request: Request,
    category: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Approved businesses, optionally within one category."""
    try:
        selected, businesses = await db.catalog.browse(category or None)
    except RemoteCallError as e:
        body = render.grid_error("businessGrid", e.message)
        return await render_page(request, db, ctx, "Browse", body, status_code=502)

    return await render_page(request, db, ctx, "Browse", render.browse_body(selected, businesses))


@router.get("/business-detail")
async def business_detail(
    request: Request,
    id: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Single business with its active products and the chat action."""
    if not id:
        return redirect("/browse")

    try:
        detail = await db.catalog.business_detail(id, ctx.user_id)
    except RemoteCallError as e:
        body = f'<p class="text-error">{render.esc(e.message)}</p>'
        return await render_page(request, db, ctx, "Business", body, status_code=502)

    if detail is None:
        body = f"<h2>{render.esc(ERROR_BUSINESS_NOT_FOUND)}</h2>"
        return await render_page(request, db, ctx, "Business", body, status_code=404)

    body = render.business_detail_body(detail.business, detail.products, ctx.session, current_url(request))
    return await render_page(request, db, ctx, detail.business.name, body)


@router.get("/dashboard")
async def dashboard(
    request: Request,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Businesses owned by the session user."""
    if ctx.session is None:
        return redirect(login_redirect_url(current_url(request)))

    try:
        businesses = await db.catalog.owned_businesses(ctx.session.user_id)
    except RemoteCallError:
        return redirect("/", ERROR_LOADING_BUSINESSES, NoticeType.ERROR)

    return await render_page(request, db, ctx, "Dashboard", render.dashboard_body(businesses))
