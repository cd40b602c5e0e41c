"""
Push Provider Base

Abstract interface for mobile push providers.
Implementations: Expo push service, Stub (for development and tests).
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PushStatus(str, Enum):
    SUCCESS = "success"
    PERMANENT_FAILURE = "permanent_failure"  # token is dead, stop using it
    TRANSIENT_FAILURE = "transient_failure"


@dataclass
class PushResult:
    status: PushStatus
    ticket_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None
    raw_response: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == PushStatus.SUCCESS

    @classmethod
    def success(cls, ticket_id: str | None = None, raw: dict[str, Any] | None = None) -> "PushResult":
        return cls(status=PushStatus.SUCCESS, ticket_id=ticket_id, raw_response=raw or {})

    @classmethod
    def permanent(cls, code: str, message: str | None = None, raw: dict[str, Any] | None = None) -> "PushResult":
        return cls(
            status=PushStatus.PERMANENT_FAILURE, error_code=code, error_message=message, raw_response=raw or {}
        )

    @classmethod
    def transient(cls, code: str, message: str | None = None, raw: dict[str, Any] | None = None) -> "PushResult":
        return cls(
            status=PushStatus.TRANSIENT_FAILURE, error_code=code, error_message=message, raw_response=raw or {}
        )


class PushProvider(ABC):
    """
    Abstract interface for push providers.

    send() must not raise for delivery problems; it reports them through
    PushResult so the caller can prune dead tokens.
    """

    @abstractmethod
    async def send(
        self,
        device_token: str,
        title: str,
        body: str,
        metadata: dict[str, Any] | None = None,
    ) -> PushResult:
        """
        Send one notification.

        Args:
            device_token: Provider token of the installed app
            title: Notification title
            body: Notification text
            metadata: Extra data delivered to the app (job id, alert type)

        Returns:
            PushResult with the delivery outcome
        """
        ...

    async def close(self) -> None:
        """Release network resources, if any."""
        return None
