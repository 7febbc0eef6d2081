"""
Transient user notices ("toasts").

A notice set by a POST handler rides the redirect in a short-lived
cookie and is rendered once by the next page.
"""
from enum import Enum
from typing import Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ValidationError
from starlette.responses import Response

from bizhub.logging import get_logger

logger = get_logger(__name__)

NOTICE_COOKIE = "notice"
NOTICE_COOKIE_MAX_AGE = 60

# Visible time, then fade-out, in milliseconds
NOTICE_VISIBLE_MS = 3000
NOTICE_FADE_MS = 300


class NoticeType(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Notice(BaseModel):
    message: str
    type: NoticeType = NoticeType.INFO


def set_notice(response: Response, message: str, type: NoticeType = NoticeType.INFO) -> Response:
    notice = Notice(message=message, type=type)
    response.set_cookie(
        NOTICE_COOKIE,
        quote(notice.model_dump_json(), safe=""),
        max_age=NOTICE_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
    )
    return response


def read_notice(raw: Optional[str]) -> Optional[Notice]:
    if not raw:
        return None
    try:
        return Notice.model_validate_json(unquote(raw))
    except ValidationError as e:
        logger.warning(f"Discarding malformed notice cookie: {e.error_count()} errors")
        return None


def clear_notice(response: Response) -> Response:
    response.delete_cookie(NOTICE_COOKIE)
    return response
