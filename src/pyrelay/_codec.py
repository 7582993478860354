"""Websocket frame encoding.

Every frame is a JSON text message ``{"event": <name>, "data": {...}}``.
Decoding also checks that the event is one the sender's role may emit.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from pyrelay.channel import Frame
from pyrelay.exceptions import RelayProtocolError
from pyrelay.models.messages import Message, MessageKind, kind_for_event
from pyrelay.session import Role

_INBOUND_KINDS: dict[Role, frozenset[MessageKind]] = {
    Role.PRODUCER: frozenset({MessageKind.RESPONSE, MessageKind.UPDATE, MessageKind.PRODUCER_ERROR}),
    Role.CONSUMER: frozenset({MessageKind.REQUEST}),
}


def encode_frame(frame: Frame) -> str:
    return json.dumps(frame.to_wire(), separators=(",", ":"))


def decode_frame(raw: str | bytes, role: Role) -> Message:
    """Parse an inbound frame from a session of *role* into a :class:`Message`."""
    try:
        obj: Any = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RelayProtocolError(f"Frame is not JSON: {str(raw)[:64]}") from exc

    if not isinstance(obj, dict):
        raise RelayProtocolError("Frame is not a JSON object")

    event = obj.get("event")
    if not isinstance(event, str) or not event:
        raise RelayProtocolError("Frame is missing 'event'")

    kind = kind_for_event(event)
    if kind is None or kind not in _INBOUND_KINDS[role]:
        raise RelayProtocolError(f"Event {event!r} not accepted from {role}", event=event)

    data = obj.get("data")
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise RelayProtocolError(f"Payload of {event!r} is not an object", event=event)

    try:
        return Message.from_payload(kind, data)
    except ValidationError as exc:
        raise RelayProtocolError(f"Invalid correlation id in {event!r}", event=event) from exc
