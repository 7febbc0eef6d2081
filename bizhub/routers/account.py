"""
Account Router

Login/logout against Supabase auth and the theme preference.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request

from bizhub.auth import SESSION_COOKIE, get_db, get_request_context, safe_return_url, sign_in
from bizhub.errors import AuthRequiredError
from bizhub.services.database import Database
from bizhub.services.models import RequestContext
from bizhub.settings import COOKIE_SECURE
from bizhub.web import render
from bizhub.web.notices import Notice, NoticeType
from bizhub.web.theme import THEME_COOKIE, THEME_COOKIE_MAX_AGE, resolve_theme

from .deps import redirect, render_page

router = APIRouter(tags=["account"])


@router.get("/login")
async def login_page(
    request: Request,
    returnUrl: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    return await render_page(request, db, ctx, "Login", render.login_body(safe_return_url(returnUrl)))


@router.post("/login")
async def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    returnUrl: Optional[str] = Form(None),
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Sign in and store the access token in the session cookie."""
    target = safe_return_url(returnUrl)
    try:
        session = await sign_in(db, email, password)
    except AuthRequiredError as e:
        notice = Notice(message=e.message, type=NoticeType.ERROR)
        body = render.login_body(target, e.message)
        return await render_page(request, db, ctx, "Login", body, status_code=401, notice=notice)

    response = redirect(target)
    response.set_cookie(
        SESSION_COOKIE,
        session.access_token,
        httponly=True,
        secure=COOKIE_SECURE,
        samesite="lax",
    )
    return response


@router.post("/logout")
async def logout():
    response = redirect("/")
    response.delete_cookie(SESSION_COOKIE)
    return response


@router.post("/theme")
async def set_theme(theme: str = Form(...), return_to: Optional[str] = Form(None)):
    """Persist the theme choice and go back to the page it was made on."""
    response = redirect(safe_return_url(return_to))
    response.set_cookie(THEME_COOKIE, resolve_theme(theme), max_age=THEME_COOKIE_MAX_AGE, samesite="lax")
    return response
