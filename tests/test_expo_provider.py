"""
Tests for the Expo push provider, with the HTTP layer mocked.
"""

import asyncio
import json

import httpx

from app.providers.push import ExpoPushProvider, PushStatus
from app.providers.push.expo import is_expo_push_token

TOKEN = "ExponentPushToken[xxxxxxxxxxxxxxxxxxxxxx]"


def _provider(handler):
    return ExpoPushProvider(url="https://push.test/send", transport=httpx.MockTransport(handler))


def _send(provider, token=TOKEN):
    async def run():
        try:
            return await provider.send(token, "Novo frete", "Campinas → Curitiba", {"job_id": "j1"})
        finally:
            await provider.close()

    return asyncio.run(run())


def test_token_format():
    assert is_expo_push_token(TOKEN)
    assert is_expo_push_token("ExpoPushToken[abc]")
    assert not is_expo_push_token("fcm:abcdef")
    assert not is_expo_push_token("")


def test_success_ticket():
    seen = {}

    def handler(request):
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"data": {"status": "ok", "id": "ticket-1"}})

    result = _send(_provider(handler))

    assert result.status == PushStatus.SUCCESS
    assert result.ticket_id == "ticket-1"
    assert seen["body"]["to"] == TOKEN
    assert seen["body"]["data"] == {"job_id": "j1"}


def test_device_not_registered_is_permanent():
    def handler(request):
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "status": "error",
                        "message": "not a registered push notification recipient",
                        "details": {"error": "DeviceNotRegistered"},
                    }
                ]
            },
        )

    result = _send(_provider(handler))
    assert result.status == PushStatus.PERMANENT_FAILURE
    assert result.error_code == "DeviceNotRegistered"


def test_rate_limit_is_transient():
    def handler(request):
        return httpx.Response(200, json={"data": {"status": "error", "details": {"error": "MessageRateExceeded"}}})

    assert _send(_provider(handler)).status == PushStatus.TRANSIENT_FAILURE


def test_server_error_is_transient():
    def handler(request):
        return httpx.Response(503, json={"errors": [{"code": "INTERNAL", "message": "down"}]})

    result = _send(_provider(handler))
    assert result.status == PushStatus.TRANSIENT_FAILURE
    assert result.error_code == "INTERNAL"


def test_network_error_is_transient():
    def handler(request):
        raise httpx.ConnectError("boom", request=request)

    assert _send(_provider(handler)).status == PushStatus.TRANSIENT_FAILURE


def test_malformed_token_skips_network():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"data": {"status": "ok"}})

    result = _send(_provider(handler), token="garbage")
    assert result.status == PushStatus.PERMANENT_FAILURE
    assert calls == []


def test_project_level_errors_keep_the_token():
    for error in ("InvalidCredentials", "MessageTooBig"):

        def handler(request, error=error):
            return httpx.Response(200, json={"data": {"status": "error", "details": {"error": error}}})

        result = _send(_provider(handler))
        assert result.status == PushStatus.TRANSIENT_FAILURE
        assert result.error_code == error
