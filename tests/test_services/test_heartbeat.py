"""Tests for the relay liveness probe."""

import httpx

from atlas.services.heartbeat import HeartbeatService


class TestHeartbeat:
    """Tests for HeartbeatService.ping."""

    async def test_ping_ok(self, transport, json_response):
        mock = transport(lambda r: json_response(200, {"status": "ok"}))
        service = HeartbeatService("http://relay.test/", transport=mock)

        assert await service.ping() is True
        assert str(mock.requests[0].url) == "http://relay.test/api/heartbeat"

    async def test_ping_error_status(self, transport, json_response):
        service = HeartbeatService("http://relay.test", transport=transport(lambda r: json_response(500, {})))
        assert await service.ping() is False

    async def test_ping_never_raises(self, transport):
        def fail(request):
            raise httpx.ConnectError("down", request=request)

        service = HeartbeatService("http://relay.test", transport=transport(fail))
        assert await service.ping() is False
        assert service.last_ok is False
