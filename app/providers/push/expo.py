"""
Expo Push Provider

Sends notifications through the Expo push service
(https://docs.expo.dev/push-notifications/sending-notifications/).
"""

import logging
import re
from typing import Any

import httpx

from app.providers.push.base import PushProvider, PushResult

logger = logging.getLogger(__name__)

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"

_TOKEN_RE = re.compile(r"^Expo(nent)?PushToken\[.+\]$")

# Ticket errors that mean the token will never work again.
# InvalidCredentials is a project setup error, not a device one.
PERMANENT_ERRORS = {"DeviceNotRegistered"}


def is_expo_push_token(token: str) -> bool:
    return bool(token) and bool(_TOKEN_RE.match(token))


class ExpoPushProvider(PushProvider):
    def __init__(
        self,
        url: str = EXPO_PUSH_URL,
        access_token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = url
        self.access_token = access_token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json", "Content-Type": "application/json"}
            if self.access_token:
                headers["Authorization"] = f"Bearer {self.access_token}"
            self._client = httpx.AsyncClient(timeout=self.timeout, headers=headers, transport=self._transport)
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def send(
        self,
        device_token: str,
        title: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> PushResult:
        if not is_expo_push_token(device_token):
            return PushResult.permanent("InvalidToken", f"Not an Expo push token: {device_token[:24]}")

        message = {
            "to": device_token,
            "title": title,
            "body": body,
            "data": metadata or {},
            "sound": "default",
        }

        client = await self._get_client()
        try:
            response = await client.post(self.url, json=message)
        except httpx.RequestError as e:
            logger.warning(f"Expo push request failed: {e}")
            return PushResult.transient("HTTP_ERROR", str(e))

        try:
            payload = response.json()
        except ValueError:
            return PushResult.transient(f"HTTP_{response.status_code}", "Non-JSON response from Expo")

        if response.status_code >= 400:
            errors = payload.get("errors") or [{}]
            code = errors[0].get("code") or f"HTTP_{response.status_code}"
            return PushResult.transient(code, errors[0].get("message"), raw=payload)

        return self._parse_ticket(payload)

    def _parse_ticket(self, payload: dict[str, Any]) -> PushResult:
        data = payload.get("data")
        if isinstance(data, list):
            data = data[0] if data else {}
        data = data or {}

        if data.get("status") == "ok":
            return PushResult.success(ticket_id=data.get("id"), raw=payload)

        error = (data.get("details") or {}).get("error") or "UnknownError"
        message = data.get("message")
        if error in PERMANENT_ERRORS:
            return PushResult.permanent(error, message, raw=payload)
        return PushResult.transient(error, message, raw=payload)
