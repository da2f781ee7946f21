"""Client for the outfit suggestion relay."""

import json
import logging
from typing import Any

import httpx

from ..models.weather import WeatherSnapshot
from .errors import SuggestionError

logger = logging.getLogger(__name__)

SUGGEST_PATH = "/api/suggest"
FALLBACK_ERROR = "Unable to generate suggestions. Make sure the relay is running (atlas --relay)."


class AdviceClient:
    """Request a clothing suggestion for a weather snapshot."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def suggest_url(self) -> str:
        return f"{self.base_url}{SUGGEST_PATH}"

    @staticmethod
    def _decode_body(response: httpx.Response) -> tuple[dict[str, Any] | None, str]:
        """Return (parsed JSON object or None, raw body text).

        JSON is only attempted when the response says it is JSON; a body
        that fails to parse is treated as plain text.
        """
        raw_text = response.text
        content_type = response.headers.get("content-type", "")
        if "application/json" not in content_type:
            return None, raw_text
        if not raw_text:
            return {}, raw_text
        try:
            data = json.loads(raw_text)
        except ValueError:
            logger.debug("Relay declared JSON but sent something else")
            return None, raw_text
        return (data if isinstance(data, dict) else None), raw_text

    async def request_suggestion(self, snapshot: WeatherSnapshot) -> str:
        """Send the snapshot to the relay and return the suggestion text.

        An empty string is a valid, successful answer.
        """
        payload = {"weather": snapshot.to_relay_payload()}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.suggest_url, json=payload)
        except httpx.HTTPError as e:
            logger.warning(f"Suggestion relay unreachable: {e}")
            raise SuggestionError(str(e) or FALLBACK_ERROR) from e

        data, raw_text = self._decode_body(response)

        if not response.is_success:
            error = data.get("error") if data else None
            message = error if isinstance(error, str) and error else raw_text or FALLBACK_ERROR
            logger.warning(f"Suggestion relay error ({response.status_code}): {message}")
            raise SuggestionError(message)

        if data is not None:
            suggestion = data.get("suggestion")
            return suggestion if isinstance(suggestion, str) else ""
        return raw_text
