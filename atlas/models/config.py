"""Configuration models using Pydantic for validation."""

import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse

from dotenv.parser import parse_stream
from pydantic import BaseModel, Field, field_validator

from .weather import UnitSystem

DEFAULT_PORT = 8989
DEFAULT_RELAY_URL = f"http://localhost:{DEFAULT_PORT}"

_FALSE_VALUES = {"0", "false", "no", "off"}


def load_env_file(env_file: Path | str) -> dict[str, str]:
    """Fill unset environment variables from a KEY=value file.

    The first declaration of a key in the file wins, and a variable that is
    already set to a non-empty value is never replaced. Returns the values
    that were applied.
    """
    declared: dict[str, str] = {}
    with open(env_file, encoding="utf-8") as stream:
        for binding in parse_stream(stream):
            if binding.key is None or binding.value is None:
                continue
            declared.setdefault(binding.key, binding.value)

    applied = {}
    for key, value in declared.items():
        if not os.environ.get(key):
            os.environ[key] = value
            applied[key] = value
    return applied


def _validate_http_url(v: str) -> str:
    """Validate that URL is a valid HTTP/HTTPS URL."""
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"URL must use http or https scheme, got '{parsed.scheme}'")
    if not parsed.netloc:
        raise ValueError("URL must have a valid host")
    return v


class ClientConfig(BaseModel):
    """Settings for the terminal client and its network calls."""

    relay_url: str = DEFAULT_RELAY_URL
    units: UnitSystem = UnitSystem.FAHRENHEIT
    geolocation_enabled: bool = True
    timeout: float = 30.0
    heartbeat_interval_seconds: float = Field(default=1.0, gt=0)

    @field_validator("relay_url")
    @classmethod
    def validate_relay_url(cls, v: str) -> str:
        """Strip trailing slashes and validate the relay base URL."""
        return _validate_http_url(v.strip().rstrip("/"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClientConfig":
        """Build client settings from environment variables."""
        env = os.environ if environ is None else environ
        data: dict[str, object] = {}

        relay_url = env.get("ATLAS_API_BASE", "").strip()
        if relay_url:
            data["relay_url"] = relay_url
        units = env.get("ATLAS_UNITS", "").strip().lower()
        if units:
            data["units"] = units
        geolocation = env.get("ATLAS_GEOLOCATION", "").strip().lower()
        if geolocation:
            data["geolocation_enabled"] = geolocation not in _FALSE_VALUES

        return cls.model_validate(data)


class RelayConfig(BaseModel):
    """Settings for the suggestion relay, built once at process start."""

    api_key: str | None = None
    model: str = "gpt-4o-mini"
    base_url: str = "https://api.openai.com/v1"
    host: str = "127.0.0.1"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    static_root: Path = Field(default_factory=Path.cwd)
    timeout: float = 60.0

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        return _validate_http_url(v.strip().rstrip("/"))

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(
        cls,
        env_file: Path | str | None = ".env",
        environ: Mapping[str, str] | None = None,
    ) -> "RelayConfig":
        """Load settings from the process environment.

        Values in ``env_file`` fill in variables that are not already set;
        existing environment values always win.
        """
        if environ is None:
            if env_file is not None and Path(env_file).exists():
                load_env_file(env_file)
            env: Mapping[str, str] = os.environ
        else:
            env = environ

        data: dict[str, object] = {
            "api_key": env.get("OPEN_AI_KEY") or env.get("OPENAI_API_KEY") or None,
        }
        if env.get("OPENAI_MODEL"):
            data["model"] = env["OPENAI_MODEL"]
        if env.get("OPENAI_BASE_URL"):
            data["base_url"] = env["OPENAI_BASE_URL"]
        if env.get("HOST"):
            data["host"] = env["HOST"]
        if env.get("PORT"):
            data["port"] = env["PORT"]
        if env.get("ATLAS_STATIC_ROOT"):
            data["static_root"] = env["ATLAS_STATIC_ROOT"]

        return cls.model_validate(data)
