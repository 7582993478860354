"""Outbound delivery to sessions.

The router and lifecycle only ever need two operations: emit a named
event to one session, or to every session of a role. Both are
synchronous so that a handler runs to completion without yielding to the
event loop.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

from pyrelay.exceptions import RelayTransportError
from pyrelay.session import Role

_logger = logging.getLogger(__name__)


class Channel(Protocol):
    """Structural channel interface used by the router and lifecycle.

    Having a protocol here makes it easy to pass recording doubles in
    tests while keeping the production implementation (`QueueChannel`)
    concrete.
    """

    def send(self, session_id: str, event: str, payload: Mapping[str, Any]) -> None:
        ...

    def broadcast(self, role: Role, event: str, payload: Mapping[str, Any]) -> int:
        ...


@dataclass(frozen=True, slots=True)
class Frame:
    """One outbound event, queued for a session's writer."""

    event: str
    data: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        return {"event": self.event, "data": self.data}


@dataclass(slots=True)
class _Outbox:
    role: Role
    queue: asyncio.Queue[Frame] = field(default_factory=asyncio.Queue)
    dropped: int = 0


class QueueChannel:
    """In-process channel with one outbound queue per attached session.

    Emitting is ``put_nowait``; a writer task per connection drains the
    queue onto its socket. Queues are unbounded unless *max_queue* is set,
    in which case frames for a full queue are dropped and counted.
    """

    def __init__(self, *, max_queue: int = 0) -> None:
        self._max_queue = max_queue
        self._outboxes: dict[str, _Outbox] = {}

    def attach(self, session_id: str, role: Role) -> asyncio.Queue[Frame]:
        """Create the outbound queue for a session and return it."""
        outbox = _Outbox(role=role, queue=asyncio.Queue(maxsize=self._max_queue))
        self._outboxes[session_id] = outbox
        return outbox.queue

    def detach(self, session_id: str) -> int:
        """Drop a session's queue. Returns how many frames were left unsent."""
        outbox = self._outboxes.pop(session_id, None)
        if outbox is None:
            return 0
        return outbox.queue.qsize()

    def is_attached(self, session_id: str) -> bool:
        return session_id in self._outboxes

    def dropped(self, session_id: str) -> int:
        outbox = self._outboxes.get(session_id)
        return outbox.dropped if outbox is not None else 0

    def _put(self, session_id: str, outbox: _Outbox, frame: Frame) -> bool:
        try:
            outbox.queue.put_nowait(frame)
        except asyncio.QueueFull:
            outbox.dropped += 1
            _logger.warning(
                "Dropping %s for slow session %s (%d dropped so far)",
                frame.event,
                session_id,
                outbox.dropped,
            )
            return False
        return True

    def send(self, session_id: str, event: str, payload: Mapping[str, Any]) -> None:
        outbox = self._outboxes.get(session_id)
        if outbox is None:
            raise RelayTransportError(f"Session {session_id} is not attached", session_id=session_id)
        self._put(session_id, outbox, Frame(event=event, data=dict(payload)))

    def broadcast(self, role: Role, event: str, payload: Mapping[str, Any]) -> int:
        """Queue *event* for every attached session of *role*; returns deliveries."""
        delivered = 0
        for session_id, outbox in list(self._outboxes.items()):
            if outbox.role != role:
                continue
            # Each recipient gets its own copy of the top-level mapping.
            if self._put(session_id, outbox, Frame(event=event, data=dict(payload))):
                delivered += 1
        return delivered
