"""Command line entry point: ``pyrelay`` / ``python -m pyrelay``."""

from __future__ import annotations

import argparse
import logging
import sys

from pyrelay._transport import run
from pyrelay.config import RelayConfig
from pyrelay.exceptions import RelayConfigError


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pyrelay",
        description="Relay hub between an inspected page and observer apps.",
    )
    parser.add_argument("--host", help="Bind address (default from PYRELAY_HOST or 0.0.0.0).")
    parser.add_argument("--port", type=int, help="Bind port (default from PYRELAY_PORT or 1111).")
    parser.add_argument(
        "--max-queue",
        type=int,
        help="Per-session outbound queue bound (0 = unbounded).",
    )
    parser.add_argument(
        "--log-payloads",
        action="store_true",
        help="Log forwarded payloads in full instead of a preview.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> RelayConfig:
    overrides: dict[str, object] = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.max_queue is not None:
        overrides["max_queue"] = args.max_queue
    if args.log_payloads:
        overrides["log_verbose"] = True
    return RelayConfig.from_env(**overrides)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = build_config(args)
    except RelayConfigError as exc:
        print(f"pyrelay: {exc}", file=sys.stderr)
        return 2

    run(config)
    return 0
