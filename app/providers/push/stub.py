"""
Stub Push Provider

Records every send without network calls. Outcomes can be scripted per token.
"""

import logging
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from app.providers.push.base import PushProvider, PushResult, PushStatus

logger = logging.getLogger(__name__)


class StubPushProvider(PushProvider):
    def __init__(self, outcomes: dict[str, PushStatus] | None = None, raise_for: set[str] | None = None):
        self.outcomes = outcomes or {}
        self.raise_for = raise_for or set()
        self.sent_messages: list[dict[str, Any]] = []

    async def send(
        self,
        device_token: str,
        title: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> PushResult:
        self.sent_messages.append(
            {
                "to": device_token,
                "title": title,
                "body": body,
                "metadata": metadata or {},
                "timestamp": datetime.now(timezone.utc).isoformat(),
            }
        )
        logger.info("[STUB] Sending push", extra={"to": device_token, "title": title})

        if device_token in self.raise_for:
            raise RuntimeError(f"stub failure for {device_token}")

        status = self.outcomes.get(device_token, PushStatus.SUCCESS)
        if status == PushStatus.PERMANENT_FAILURE:
            return PushResult.permanent("DeviceNotRegistered", "Simulated dead token")
        if status == PushStatus.TRANSIENT_FAILURE:
            return PushResult.transient("STUB_SIMULATED_FAILURE", "Simulated failure for testing")
        return PushResult.success(ticket_id=f"stub_{uuid4().hex[:16]}")

    def get_sent_messages(self) -> list[dict[str, Any]]:
        """Get all sent messages (for testing)."""
        return self.sent_messages.copy()
