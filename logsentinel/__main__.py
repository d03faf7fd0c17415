"""Run the detection service.

Usage:
    python -m logsentinel --host 127.0.0.1 --port 8080

The baseline is rebuilt during startup; if that fails the process exits
with a non-zero status before accepting any request.
"""

import argparse
import sys

import uvicorn

from logsentinel.api.app import create_app
from logsentinel.config import get_settings
from logsentinel.logging_config import setup_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line overrides for the configured bind address."""
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="logsentinel",
        description="Serve semantic log anomaly checks over HTTP",
    )
    parser.add_argument(
        "--host",
        default=settings.api_host,
        help=f"Interface to bind (default: {settings.api_host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.api_port,
        help=f"Port to bind (default: {settings.api_port})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help=f"Log level (default: {settings.log_level})",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Serve until interrupted.

    Returns:
        Exit code: 0 on clean shutdown. Startup and bind failures make
        uvicorn exit with its own non-zero status.
    """
    args = parse_args(argv)
    settings = get_settings().model_copy(
        update={"api_host": args.host, "api_port": args.port, "log_level": args.log_level}
    )
    setup_logging(level=settings.log_level)

    uvicorn.run(
        create_app(settings),
        host=settings.api_host,
        port=settings.api_port,
        lifespan="on",
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
