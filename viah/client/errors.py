"""
Errors raised by viah.client for non-2xx API responses.

The API puts structured errors inside FastAPI's `detail` envelope as
{"code": ..., "message": ...}; classification uses that code, never the
message text.
"""

from typing import Any

import httpx

CONVERSATION_CLOSED = "conversation_closed"
DUPLICATE_VENDOR = "duplicate_vendor"


class ApiError(Exception):
    def __init__(
        self,
        status_code: int,
        code: str | None,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code}, code={self.code!r})"


class ConversationClosedError(ApiError):
    """Send rejected because the conversation was closed."""


class DuplicateVendorError(ApiError):
    """Vendor submission looks like an existing listing."""

    @property
    def matches(self) -> list[dict[str, Any]]:
        return self.details.get("matches", [])


_ERRORS_BY_CODE: dict[str, type[ApiError]] = {
    CONVERSATION_CLOSED: ConversationClosedError,
    DUPLICATE_VENDOR: DuplicateVendorError,
}


def error_from_response(response: httpx.Response) -> ApiError:
    """Build the most specific ApiError for a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, dict):
        code = detail.get("code")
        message = detail.get("message") or response.reason_phrase
        details = {k: v for k, v in detail.items() if k not in ("code", "message")}
    else:
        code = None
        message = detail if isinstance(detail, str) else (response.text or response.reason_phrase)
        details = {}

    error_cls = _ERRORS_BY_CODE.get(code, ApiError)
    return error_cls(response.status_code, code, message, details)
