"""Relay liveness probe."""

import logging

import httpx

logger = logging.getLogger(__name__)

HEARTBEAT_PATH = "/api/heartbeat"


class HeartbeatService:
    """Fire-and-forget pings against the relay."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.url = f"{base_url.rstrip('/')}{HEARTBEAT_PATH}"
        self.timeout = timeout
        self._transport = transport
        self.last_ok: bool | None = None

    async def ping(self) -> bool:
        """Ping the relay. Never raises; returns whether it answered 2xx."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.url)
            self.last_ok = response.is_success
        except httpx.HTTPError as e:
            logger.debug(f"Heartbeat failed: {e}")
            self.last_ok = False
        return self.last_ok
