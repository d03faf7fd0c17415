#!/usr/bin/env python
"""Check a log line against a running detection service.

Usage:
    python -m scripts.check_log "ERROR: kernel panic on node-7" --url http://127.0.0.1:8080

Exit codes: 0 when the line is normal, 1 when it is anomalous, 2 when the
request fails. This makes the script usable as a shell or CI gate.
"""

import argparse
import asyncio
import json
import sys

import httpx

from logsentinel.logging_config import get_logger, setup_logging

logger = get_logger(__name__)

EXIT_NORMAL = 0
EXIT_ANOMALOUS = 1
EXIT_ERROR = 2


async def check_log(url: str, log_entry: str, timeout: float = 30.0) -> dict[str, object]:
    """Post a log line to ``/check_log`` and return the decoded verdict.

    Raises:
        httpx.HTTPError: If the request fails or the service answers
            with an error status.
    """
    async with httpx.AsyncClient(base_url=url, timeout=timeout) as client:
        response = await client.post("/check_log", json={"log_entry": log_entry})
        response.raise_for_status()
        return response.json()


async def run(url: str, log_entry: str, timeout: float) -> int:
    """Run a single check and translate the verdict to an exit code."""
    try:
        verdict = await check_log(url, log_entry, timeout)
    except httpx.HTTPStatusError as e:
        logger.error(f"Service returned {e.response.status_code}: {e.response.text}")
        return EXIT_ERROR
    except httpx.HTTPError as e:
        logger.error(f"Request failed: {e!r}")
        return EXIT_ERROR

    print(json.dumps(verdict, indent=2))
    return EXIT_ANOMALOUS if verdict.get("is_anomalous") else EXIT_NORMAL


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Check a log line for anomalies")
    parser.add_argument("log_entry", help="Log line to check")
    parser.add_argument(
        "--url",
        default="http://127.0.0.1:8080",
        help="Base URL of the detection service",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds",
    )
    args = parser.parse_args()

    setup_logging(level="WARNING")
    sys.exit(asyncio.run(run(args.url, args.log_entry, args.timeout)))


if __name__ == "__main__":
    main()
