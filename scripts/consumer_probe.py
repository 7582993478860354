#!/usr/bin/env python3
"""Passive consumer probe for a running relay.

Connects to the consumer endpoint, optionally sends one request built with
the action helpers, and prints every event the relay pushes. Use this to
check catch-up delivery and fan-out against a live producer.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
import uuid
from pathlib import Path
from typing import Any

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

import aiohttp  # noqa: E402

from pyrelay._constants import CONSUMER_PATH, DEFAULT_PORT, EVENT_REQUEST  # noqa: E402
from pyrelay.models import actions  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Print events pushed by a pyrelay server to a consumer.",
    )
    parser.add_argument(
        "--url",
        default=f"ws://127.0.0.1:{DEFAULT_PORT}{CONSUMER_PATH}",
        help="Consumer websocket URL.",
    )
    parser.add_argument(
        "--inspect",
        metavar="NODE_ID",
        help="Send SET_INSPECTION_ROOT for this node once connected.",
    )
    parser.add_argument(
        "--styles",
        metavar="NODE_ID",
        help="Send REQUEST_STYLE_FOR_NODE for this node once connected.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Pretty-print full payloads instead of a one-line summary.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _print_event(frame: dict[str, Any], pretty: bool) -> None:
    data = frame.get("data") or {}
    print(f"[probe] {frame.get('event')} type={data.get('type')} id={data.get('id')}")
    if pretty:
        print(json.dumps(data, indent=2))


async def _probe(args: argparse.Namespace) -> int:
    requests: list[dict[str, Any]] = []
    if args.inspect is not None:
        requests.append(actions.set_inspection_root(args.inspect))
    if args.styles is not None:
        requests.append(actions.request_style_for_node(args.styles))

    async with aiohttp.ClientSession() as session, session.ws_connect(args.url) as ws:
        print(f"[probe] connected to {args.url}")
        for body in requests:
            await ws.send_json({"event": EVENT_REQUEST, "data": {**body, "id": uuid.uuid4().hex}})

        async def _read() -> None:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    _print_event(msg.json(), args.json)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    print(f"[probe] socket error: {ws.exception()}", file=sys.stderr)

        if args.duration > 0:
            try:
                await asyncio.wait_for(_read(), timeout=args.duration)
            except TimeoutError:
                pass
        else:
            await _read()

    print("[probe] disconnected")
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(_probe(args))
    except KeyboardInterrupt:
        return 0
    except (aiohttp.ClientError, ValueError) as exc:
        print(f"[probe] failed: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(_main())
