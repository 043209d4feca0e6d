"""
Async HTTP client for the Viah API.
"""

from typing import Any

import httpx

from viah.client.errors import error_from_response
from viah.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

REQUEST_TIMEOUT = 15  # seconds


class ViahApiClient:
    """
    Thin JSON client: one method per endpoint the client package uses.

    No retries. Every non-2xx response raises an ApiError subclass.
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(REQUEST_TIMEOUT),
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ViahApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        response = await self._client.request(method, path, json=json, params=params)
        if response.is_success:
            if response.status_code == 204 or not response.content:
                return None
            return response.json()

        error = error_from_response(response)
        logger.warning(
            "API request failed",
            method=method,
            path=path,
            status_code=error.status_code,
            code=error.code,
        )
        raise error

    # Messaging

    async def list_wedding_conversations(self, wedding_id: str) -> list[dict]:
        return await self.request("GET", f"/api/conversations/wedding/{wedding_id}")

    async def get_conversation_status(self, conversation_id: str) -> dict:
        return await self.request("GET", f"/api/conversations/{conversation_id}/status")

    async def close_conversation(self, conversation_id: str, reason: str | None = None) -> dict:
        return await self.request(
            "PATCH", f"/api/conversations/{conversation_id}/close", json={"reason": reason}
        )

    async def mark_conversation_read(self, conversation_id: str) -> dict:
        return await self.request("PATCH", f"/api/conversations/{conversation_id}/read")

    async def get_messages(self, conversation_id: str) -> list[dict]:
        return await self.request("GET", f"/api/messages/{conversation_id}")

    async def send_message(
        self, *, wedding_id: str, vendor_id: str, event_id: str | None, content: str
    ) -> dict:
        payload = {"wedding_id": wedding_id, "vendor_id": vendor_id, "event_id": event_id, "content": content}
        return await self.request("POST", "/api/messages", json=payload)

    # Dashboard

    async def get_widgets(self, wedding_id: str) -> list[dict]:
        return await self.request("GET", f"/api/dashboard/widgets/{wedding_id}")

    async def update_widget(self, widget_id: str, **changes: Any) -> dict:
        return await self.request("PATCH", f"/api/dashboard/widgets/{widget_id}", json=changes)

    async def reorder_widgets(self, wedding_id: str, widget_ids: list[str]) -> list[dict]:
        return await self.request(
            "POST",
            "/api/dashboard/widgets/reorder",
            json={"wedding_id": wedding_id, "widget_ids": widget_ids},
        )

    async def get_financial_dashboard(self, wedding_id: str) -> dict:
        return await self.request("GET", f"/api/dashboard/financial/{wedding_id}")

    # Notifications

    async def get_couple_notifications(self, wedding_id: str) -> dict:
        return await self.request("GET", f"/api/notifications/couple/{wedding_id}")

    # Vendors

    async def submit_vendor(self, submission: dict) -> dict:
        return await self.request("POST", "/api/vendors/submit", json=submission)

    async def calendar_auth_url(self, provider: str) -> str:
        data = await self.request("GET", f"/api/calendar/{provider}/auth-url")
        return data["auth_url"]
