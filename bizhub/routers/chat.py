"""
Chat Router

Start-chat action (find-or-create), conversation list, conversation view
and message sending.
"""
from typing import Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, Request

from bizhub.auth import get_db, get_request_context, login_redirect_url, safe_return_url
from bizhub.errors import (
    ERROR_UNEXPECTED,
    AuthRequiredError,
    BizHubError,
    NotParticipantError,
)
from bizhub.logging import get_logger
from bizhub.services.database import Database
from bizhub.services.models import RequestContext
from bizhub.web import render
from bizhub.web.notices import NoticeType

from .deps import current_url, redirect, referer_path, render_page

logger = get_logger(__name__)

router = APIRouter(tags=["chat"])


def chat_url(conversation_id: str) -> str:
    return f"/chat?conversation_id={quote(conversation_id)}"


@router.post("/chat/start")
async def start_chat(
    request: Request,
    target_user_id: str = Form(""),
    business_id: Optional[str] = Form(None),
    return_url: Optional[str] = Form(None),
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """
    Open the conversation with target_user_id, creating it if needed.

    Without a session the user is sent to the login page with the
    originating page as returnUrl; nothing is queried.
    """
    origin = safe_return_url(return_url or referer_path(request))

    try:
        result = await db.chat.start_chat(ctx.session, target_user_id, business_id or None)
    except AuthRequiredError:
        return redirect(login_redirect_url(origin))
    except BizHubError as e:
        return redirect(origin, e.message, NoticeType.ERROR)
    except Exception as e:
        logger.error(f"Unexpected error starting chat: {e}", exc_info=True)
        return redirect(origin, ERROR_UNEXPECTED, NoticeType.ERROR)

    return redirect(chat_url(result.conversation_id))


@router.get("/chat")
async def chat_page(
    request: Request,
    conversation_id: Optional[str] = None,
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    """Conversation list, or one conversation when conversation_id is given."""
    if ctx.session is None:
        return redirect(login_redirect_url(current_url(request)))

    if not conversation_id:
        try:
            conversations = await db.chat.list_conversations(ctx.session)
        except BizHubError as e:
            return redirect("/", e.message, NoticeType.ERROR)
        body = render.conversation_list_body(conversations, ctx.session.user_id)
        return await render_page(request, db, ctx, "Messages", body)

    try:
        view = await db.chat.open_conversation(ctx.session, conversation_id)
    except NotParticipantError as e:
        body = f'<div class="access-denied"><h1>Access Denied</h1><p>{render.esc(e.message)}</p></div>'
        return await render_page(request, db, ctx, "Chat", body, status_code=403)
    except BizHubError as e:
        return redirect("/chat", e.message, NoticeType.ERROR)

    body = render.conversation_body(view.conversation, view.messages, ctx.session.user_id)
    return await render_page(request, db, ctx, "Chat", body)


@router.post("/chat/{conversation_id}/messages")
async def send_message(
    request: Request,
    conversation_id: str,
    content: str = Form(""),
    ctx: RequestContext = Depends(get_request_context),
    db: Database = Depends(get_db),
):
    if ctx.session is None:
        return redirect(login_redirect_url(chat_url(conversation_id)))

    try:
        await db.chat.send_message(ctx.session, conversation_id, content)
    except NotParticipantError as e:
        return redirect("/chat", e.message, NoticeType.ERROR)
    except BizHubError as e:
        return redirect(chat_url(conversation_id), e.message, NoticeType.ERROR)

    return redirect(chat_url(conversation_id))
