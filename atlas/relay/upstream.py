"""Client for the upstream text-generation provider."""

import logging
from typing import Any

import httpx

from ..models.config import RelayConfig
from ..services.errors import ConfigurationError, UpstreamError

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "OPEN_AI_KEY is missing in .env"
TEXT_PART_TYPES = {"output_text", "text"}


def extract_output_text(response: Any) -> str:
    """Pull plain text out of a Responses API envelope.

    Prefers the flattened ``output_text`` field; otherwise joins the text
    parts of every message item in ``output``.
    """
    if not isinstance(response, dict):
        return ""
    flattened = response.get("output_text")
    if isinstance(flattened, str):
        return flattened.strip()

    output = response.get("output")
    if not isinstance(output, list):
        return ""

    fragments: list[str] = []
    for item in output:
        if not isinstance(item, dict):
            continue
        if item.get("type") == "message" and isinstance(item.get("content"), list):
            for part in item["content"]:
                if isinstance(part, dict) and part.get("type") in TEXT_PART_TYPES:
                    fragments.append(part.get("text") or "")
        elif item.get("type") == "output_text" and item.get("text"):
            fragments.append(item["text"])
    return "".join(fragments).strip()


class GenerationClient:
    """Send prompts to the provider's responses endpoint."""

    def __init__(self, config: RelayConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.config.base_url}/responses"

    async def generate(self, instructions: str, prompt: str) -> dict[str, Any]:
        """Create a response and return the decoded envelope."""
        if not self.config.api_key:
            raise ConfigurationError(MISSING_KEY_MESSAGE)

        payload = {
            "model": self.config.model,
            "instructions": instructions,
            "input": prompt,
        }
        headers = {"Authorization": f"Bearer {self.config.api_key}"}

        try:
            async with httpx.AsyncClient(
                timeout=self.config.timeout, transport=self._transport
            ) as client:
                response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"Connection error calling OpenAI: {e}")
            raise UpstreamError(f"OpenAI request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"OpenAI HTTP error: {response.status_code}")
            raise UpstreamError(
                f"OpenAI error ({response.status_code}): {response.text}",
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("OpenAI returned an unreadable response.") from e
