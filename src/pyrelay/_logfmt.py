"""Helpers for payload logging.

Forwarded payloads can be large (whole document trees), so log lines
carry either the full indented JSON or a short preview of it.
"""

from __future__ import annotations

import json
from typing import Any

from pyrelay._constants import TRUNCATE_LENGTH


def _dump(value: Any, *, indent: int | None) -> str:
    try:
        return json.dumps(value, indent=indent, sort_keys=False, default=repr)
    except (TypeError, ValueError):
        # Circular structures and the like.
        return repr(value)


def format_payload_for_log(
    value: Any,
    *,
    verbose: bool = False,
    max_length: int = TRUNCATE_LENGTH,
) -> str:
    """Return a printable form of *value* for a log line.

    Verbose mode returns the full, indented JSON dump. Otherwise the
    compact dump is cut to *max_length* characters and suffixed with
    ``...`` when anything was cut.
    """
    if verbose:
        return _dump(value, indent=2)

    text = _dump(value, indent=None)
    if len(text) <= max_length:
        return text
    return f"{text[:max_length]}..."
