"""Terminal CLI entrypoint for zpresence."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys

from zpresence.core.config import (
    DEFAULT_CHECK_INTERVAL_SEC,
    ConfigError,
    PresenceConfig,
    build_config,
)
from zpresence.core.engine import PresenceEngine
from zpresence.zwift.replay import simulate_file

APP_NAME = "zpresence"
APP_VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Discord Rich Presence integration for Zwift",
        epilog="See https://discord.com/developers/applications for application ID.",
    )
    parser.add_argument("-a", "--app-id", default=None, help="Discord Application ID (required)")
    parser.add_argument(
        "-i",
        "--check-interval",
        type=int,
        default=DEFAULT_CHECK_INTERVAL_SEC,
        help="Check interval in seconds",
    )
    parser.add_argument(
        "-l",
        "--log-level",
        default=None,
        help="Log level: debug|info|warning|error (default: info)",
    )
    parser.add_argument(
        "-t",
        "--test-mode",
        action="store_true",
        help="Treat the game as always running (no Zwift process required)",
    )
    parser.add_argument(
        "--log-path",
        default=None,
        help="Zwift log file (default: ~/Documents/Zwift/Logs/Log.txt)",
    )
    parser.add_argument(
        "--test-log",
        metavar="PATH",
        default=None,
        help="Simulate parsing a log file for debugging",
    )
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"{APP_NAME} {APP_VERSION}",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="[%(levelname)s] %(message)s",
    )


def print_banner(config: PresenceConfig) -> None:
    test_mode = " (test mode)" if config.test_mode else ""
    print(f"starting{test_mode}")
    print(f"app_id: {config.application_id}")
    print(f"check_interval: {config.check_interval_sec}s")
    print(f"log_level: {config.log_level}")
    print(f"log_path: {config.log_path}")
    print("")


async def run_monitor(config: PresenceConfig) -> int:
    engine = PresenceEngine(config)
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        # add_signal_handler is unavailable on Windows event loops.
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, engine.stop)

    await engine.run()
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.test_log:
        return simulate_file(args.test_log, check_interval=max(1, args.check_interval))

    try:
        config = build_config(
            application_id=args.app_id,
            check_interval_sec=args.check_interval,
            log_path=args.log_path,
            log_level=args.log_level,
            test_mode=args.test_mode,
        )
    except ConfigError as exc:
        print(f"{APP_NAME}: {exc}", file=sys.stderr)
        return 1

    configure_logging(config.log_level)
    print_banner(config)
    try:
        return asyncio.run(run_monitor(config))
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    raise SystemExit(main())
