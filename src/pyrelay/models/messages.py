"""Routed message envelope.

A :class:`Message` is what travels through the router. On the socket it
is a named event whose payload object carries the correlation id under
``id`` next to the body keys.
"""

from __future__ import annotations

import copy
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pyrelay._constants import (
    CORRELATION_KEY,
    EVENT_PRODUCER_ERROR,
    EVENT_REQUEST,
    EVENT_RESPONSE,
    EVENT_ROUTER_ERROR,
    EVENT_UPDATE,
    NO_PRODUCER_MESSAGE,
    ROUTER_ERROR_TYPE,
)

CorrelationId = str | int


class MessageKind(StrEnum):
    REQUEST = "request"
    RESPONSE = "response"
    UPDATE = "update"
    PRODUCER_ERROR = "producer_error"
    ROUTER_ERROR = "router_error"


_EVENT_BY_KIND: dict[MessageKind, str] = {
    MessageKind.REQUEST: EVENT_REQUEST,
    MessageKind.RESPONSE: EVENT_RESPONSE,
    MessageKind.UPDATE: EVENT_UPDATE,
    MessageKind.PRODUCER_ERROR: EVENT_PRODUCER_ERROR,
    MessageKind.ROUTER_ERROR: EVENT_ROUTER_ERROR,
}
_KIND_BY_EVENT: dict[str, MessageKind] = {event: kind for kind, event in _EVENT_BY_KIND.items()}


def kind_for_event(event: str) -> MessageKind | None:
    """Map a wire event name to its message kind (``None`` if unknown)."""
    return _KIND_BY_EVENT.get(event)


class Message(BaseModel):
    """A payload in flight between sessions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: MessageKind
    correlation_id: CorrelationId | None = None
    body: dict[str, Any] = Field(default_factory=dict)

    @property
    def event(self) -> str:
        return _EVENT_BY_KIND[self.kind]

    @classmethod
    def from_payload(cls, kind: MessageKind, payload: dict[str, Any]) -> Message:
        """Split a wire payload into correlation id and body."""
        body = dict(payload)
        correlation_id = body.pop(CORRELATION_KEY, None)
        return cls(kind=kind, correlation_id=correlation_id, body=body)

    def to_payload(self) -> dict[str, Any]:
        """Rebuild the wire payload. ``id`` is omitted when unset."""
        payload = copy.deepcopy(self.body)
        if self.correlation_id is not None:
            payload[CORRELATION_KEY] = self.correlation_id
        return payload

    def with_correlation_id(self, correlation_id: CorrelationId) -> Message:
        return self.model_copy(update={"correlation_id": correlation_id})


def router_error(correlation_id: CorrelationId | None, message: str = NO_PRODUCER_MESSAGE) -> Message:
    """Build the error sent to consumers when a request cannot be routed."""
    return Message(
        kind=MessageKind.ROUTER_ERROR,
        correlation_id=correlation_id,
        body={"type": ROUTER_ERROR_TYPE, "message": message},
    )
