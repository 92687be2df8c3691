#!/usr/bin/env python3
"""
Start the Local Event Finder API server.

Usage:
    python -m api.cli.serve                 # Host/port from settings (default 0.0.0.0:3001)
    python -m api.cli.serve --port 8080     # Custom port
    python -m api.cli.serve --reload        # Development auto-reload
"""

import argparse
import logging
import sys

import uvicorn

from api.config import configure_logging, get_settings

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Run the server; returns a non-zero status only if startup fails."""
    settings = get_settings()
    configure_logging(settings)

    parser = argparse.ArgumentParser(description="Start the Local Event Finder API")
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Host to bind to (default: {settings.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to bind to (default: {settings.port})",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    args = parser.parse_args(argv)

    if not settings.has_event_source:
        logger.error("EVENTBRITE_API_KEY is not set; refusing to start")
        return 1

    logger.info("Proxy server running on http://%s:%d", args.host, args.port)
    try:
        uvicorn.run(
            "api.index:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=settings.log_level.lower(),
        )
    except (OSError, SystemExit) as e:
        # uvicorn exits with SystemExit(1) when it cannot bind
        logger.error("Server failed to start: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
