from typing import Any, Dict, List, Optional

import httpx

DEFAULT_TIMEOUT = 10.0


class NotificationsClient:
    """Async client for the ``/user/notifications`` endpoints."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url, headers=self._build_headers(), timeout=timeout, transport=transport
        )

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def list(self) -> List[Dict[str, Any]]:
        r = await self._client.get("/user/notifications")
        r.raise_for_status()
        data = r.json()
        # Accept both a bare list and {"notifications": [...]}
        if isinstance(data, dict):
            data = data.get("notifications", [])
        if not isinstance(data, list):
            raise ValueError(f"unexpected notifications payload: {type(data).__name__}")
        return data

    async def mark_read(self, notification_id: Optional[int] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        if notification_id is not None:
            payload["notificationId"] = notification_id
        r = await self._client.patch("/user/notifications", json=payload)
        r.raise_for_status()
        return r.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "NotificationsClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
