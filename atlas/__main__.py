"""Entry point for running the weather atlas as a module."""

import argparse
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_logger = logging.getLogger(__name__)


def build_log_handlers(log_name: str = "atlas.log", console: bool = True) -> list[logging.Handler]:
    """Create the stderr and rotating file handlers.

    The terminal client passes ``console=False`` so log lines never draw over
    the UI.
    """
    handlers: list[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler(sys.stderr))

    # Try to add rotating file handler
    log_dir = Path("logs")
    try:
        log_dir.mkdir(exist_ok=True)
        # Rotate at 10MB, keep 5 backup files
        file_handler = RotatingFileHandler(
            log_dir / log_name,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        handlers.append(file_handler)
    except (PermissionError, OSError):
        pass  # Skip file logging if we can't write
    return handlers


def setup_logging(log_level: str = "INFO", log_name: str = "atlas.log", console: bool = True) -> None:
    """Configure logging with rotation support.

    Args:
        log_level: The logging level (DEBUG, INFO, WARNING, ERROR)
        log_name: File name of the rotating log under ``logs/``
        console: Also log to stderr
    """
    handlers = build_log_handlers(log_name, console)
    if not handlers:
        handlers = [logging.NullHandler()]

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def run_relay(env_file: Path, log_level: str) -> None:
    """Start the suggestion relay with uvicorn."""
    import uvicorn

    from .models.config import RelayConfig
    from .relay import create_app

    config = RelayConfig.from_env(env_file)
    _logger.info(f"Relay listening on http://{config.host}:{config.port}")
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_level=log_level.lower())


def run_client(env_file: Path) -> None:
    """Start the terminal client."""
    from .app import AtlasApp
    from .models.config import ClientConfig, load_env_file

    if env_file.exists():
        load_env_file(env_file)
    AtlasApp(config=ClientConfig.from_env()).run()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Local Weather Atlas - current conditions with outfit suggestions"
    )
    parser.add_argument(
        "--relay",
        action="store_true",
        help="Run the suggestion relay server instead of the terminal client",
    )
    parser.add_argument(
        "-e",
        "--env-file",
        type=Path,
        default=Path(".env"),
        help="Path to a KEY=value file loaded at startup (default: .env)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    args = parser.parse_args()

    if args.version:
        from . import __version__

        print(f"Local Weather Atlas v{__version__}")
        sys.exit(0)

    log_level = "DEBUG" if args.verbose else "INFO"
    if args.relay:
        setup_logging(log_level, "relay.log")
    else:
        setup_logging(log_level, "atlas.log", console=False)

    if args.relay:
        run_relay(args.env_file, log_level)
    else:
        _logger.info("Starting Local Weather Atlas")
        run_client(args.env_file)


if __name__ == "__main__":
    main()
