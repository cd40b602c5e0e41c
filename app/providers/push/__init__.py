from app.providers.push.base import PushProvider, PushResult, PushStatus
from app.providers.push.expo import ExpoPushProvider
from app.providers.push.stub import StubPushProvider

__all__ = ["PushProvider", "PushResult", "PushStatus", "ExpoPushProvider", "StubPushProvider"]
