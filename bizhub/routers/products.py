"""
Product Manager Router

Owner-only catalog screen for one business: list, add, edit, delete.
Ownership failures render the access-denied page (403) instead of
redirecting, so the owner sees which ids were compared.
"""
from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from bizhub.auth import get_db, get_request_context, login_redirect_url
from bizhub.errors import (
    ERROR_BUSINESS_ID_MISSING,
    AuthRequiredError,
    BizHubError,
    OwnershipError,
)
from bizhub.services.database import Database
from bizhub.services.models import ImageUpload, ProductForm, RequestContext
from bizhub.web import render
from bizhub.web.notices import Notice, NoticeType

from .deps import current_url, redirect, render_page

router = APIRouter(tags=["products"])


def _manage_url(business_id: str) -> str:
    return f"/products?id={quote(business_id)}"


async def _access_denied(request: Request, db: Database, ctx: RequestContext, error: OwnershipError):
    return await render_page(request, db, ctx, "Access Denied", render.access_denied_body(error), status_code=403)


@router.get("/products")
async def manage_products(
    request: Request,
    id: Optional[str] = None,
    edit: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Product list for the owner, with the add/edit form."""
    if not id:
        return redirect("/dashboard", ERROR_BUSINESS_ID_MISSING, NoticeType.ERROR)
    if ctx.session is None:
        return redirect(login_redirect_url(current_url(request)))

    ctx.business_id = id
    try:
        view = await db.products.open_manager(ctx, edit)
    except OwnershipError as e:
        return await _access_denied(request, db, ctx, e)

    notice = Notice(message=view.edit_error, type=NoticeType.ERROR) if view.edit_error else None

    if view.products_error:
        products_html = render.grid_error("productsGrid", view.products_error)
    else:
        products_html = render.grid(
            (render.product_card(p, manage_business_id=id) for p in view.products),
            "productsGrid",
            "No products yet. Add your first product!",
        )

    body = render.products_body(view.business, products_html, render.product_form(id, view.editing))
    return await render_page(request, db, ctx, "Manage Products", body, notice=notice)


async def _read_uploads(images: List[UploadFile]) -> List[ImageUpload]:
    uploads = []
    for image in images:
        # An empty file input still submits one nameless part
        if not image.filename:
            continue
        uploads.append(
            ImageUpload(
                filename=image.filename,
                content=await image.read(),
                content_type=image.content_type or "application/octet-stream",
            )
        )
    return uploads


@router.post("/products/{business_id}/save")
async def save_product(
    request: Request,
    business_id: str,
    name: str = Form(...),
    description: str = Form(""),
    price: str = Form(""),
    product_id: Optional[str] = Form(None),
    images: List[UploadFile] = File(default=[]),
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Create a product, or update ``product_id`` when the form carries one."""
    ctx.business_id = business_id
    ctx.editing_product_id = product_id or None

    form = ProductForm(name=name, description=description, price=price)
    try:
        await db.products.save_product(ctx, form, await _read_uploads(images))
    except AuthRequiredError:
        return redirect(login_redirect_url(_manage_url(business_id)))
    except OwnershipError as e:
        return await _access_denied(request, db, ctx, e)
    except BizHubError as e:
        return redirect(_manage_url(business_id), e.message, NoticeType.ERROR)

    message = "Product updated successfully" if ctx.editing_product_id else "Product added successfully"
    return redirect(_manage_url(business_id), message, NoticeType.SUCCESS)


@router.post("/products/{business_id}/{product_id}/delete")
async def delete_product(
    request: Request,
    business_id: str,
    product_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    ctx.business_id = business_id
    try:
        await db.products.delete_product(ctx, product_id)
    except AuthRequiredError:
        return redirect(login_redirect_url(_manage_url(business_id)))
    except OwnershipError as e:
        return await _access_denied(request, db, ctx, e)
    except BizHubError as e:
        return redirect(_manage_url(business_id), e.message, NoticeType.ERROR)

    return redirect(_manage_url(business_id), "Product deleted successfully", NoticeType.SUCCESS)
