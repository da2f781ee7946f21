"""FastAPI application for the suggestion relay."""

import json
import logging
from pathlib import Path

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse, Response
from pydantic import ValidationError

from .. import __version__
from ..models.config import RelayConfig
from ..services.errors import AtlasError, BadRequestError, EmptyResultError
from .prompt import SYSTEM_INSTRUCTIONS, RelayWeather, build_prompt
from .upstream import GenerationClient, extract_output_text

logger = logging.getLogger(__name__)

MIME_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "text/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

router = APIRouter()


async def _read_json(request: Request) -> object:
    body = await request.body()
    if not body:
        return {}
    try:
        return json.loads(body)
    except ValueError as e:
        raise BadRequestError("Invalid JSON body.") from e


async def suggest_outfit(weather: RelayWeather, generator: GenerationClient) -> str:
    """Build the prompt, call the provider and return non-empty advice text."""
    prompt = build_prompt(weather)
    logger.debug(f"Generated prompt:\n{prompt}")
    response = await generator.generate(SYSTEM_INSTRUCTIONS, prompt)
    suggestion = extract_output_text(response)
    if not suggestion:
        raise EmptyResultError("No suggestion returned.")
    return suggestion


@router.post("/api/suggest")
async def suggest(request: Request) -> JSONResponse:
    logger.info("Received /api/suggest request")
    generator: GenerationClient = request.app.state.generator

    try:
        body = await _read_json(request)
        raw_weather = body.get("weather") if isinstance(body, dict) else None
        if not isinstance(raw_weather, dict):
            raise BadRequestError("Missing weather details.")
        try:
            weather = RelayWeather.model_validate(raw_weather)
        except ValidationError as e:
            raise BadRequestError("Invalid weather details.") from e
        suggestion = await suggest_outfit(weather, generator)
    except AtlasError as e:
        log = logger.warning if e.status_code < 500 else logger.error
        log(f"Suggestion failed ({e.status_code}): {e.message}")
        return JSONResponse({"error": e.message}, status_code=e.status_code)
    except Exception:
        logger.exception("Unhandled error in /api/suggest")
        return JSONResponse({"error": "Server error."}, status_code=500)

    return JSONResponse({"suggestion": suggestion})


@router.get("/api/heartbeat")
async def heartbeat() -> dict[str, str]:
    return {"status": "ok"}


def resolve_static_path(root: Path, url_path: str) -> Path | None:
    """Map a URL path to a file under ``root``, or None if not servable."""
    relative = url_path.strip("/") or "index.html"
    parts = Path(relative).parts
    if any(part.startswith(".") for part in parts):
        return None

    root = root.resolve()
    candidate = (root / relative).resolve()
    if not candidate.is_relative_to(root) or not candidate.is_file():
        return None
    return candidate


@router.get("/{path:path}")
async def static_asset(path: str, request: Request) -> Response:
    config: RelayConfig = request.app.state.config
    file_path = resolve_static_path(config.static_root, path)
    if file_path is None:
        return PlainTextResponse("Not found", status_code=404)
    media_type = MIME_TYPES.get(file_path.suffix.lower(), DEFAULT_MIME_TYPE)
    return FileResponse(file_path, media_type=media_type)


def create_app(config: RelayConfig, transport: httpx.AsyncBaseTransport | None = None) -> FastAPI:
    """Create the relay app around an explicit configuration."""
    app = FastAPI(title="Weather Atlas Relay", version=__version__)
    app.state.config = config
    app.state.generator = GenerationClient(config, transport=transport)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )
    app.include_router(router)

    if not config.has_credential:
        logger.warning("No OpenAI credential configured; /api/suggest will fail")
    return app
