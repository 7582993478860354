"""Relay hub: the registry, cache, router and lifecycle wired together."""

from __future__ import annotations

import logging
from typing import Any

from pyrelay.channel import Channel, QueueChannel
from pyrelay.config import RelayConfig
from pyrelay.lifecycle import SessionContext, SessionLifecycle
from pyrelay.models.messages import Message, kind_for_event
from pyrelay.registry import ConnectionRegistry
from pyrelay.router import MessageRouter, RouteResult
from pyrelay.session import IdFactory, Role, Session, new_id
from pyrelay.state.cache import StateCache

_logger = logging.getLogger(__name__)


class RelayHub:
    """Transport-independent relay core.

    Usage::

        hub = RelayHub(RelayConfig())
        ctx = hub.connect(Role.CONSUMER)
        hub.route(ctx.session, message)
        hub.disconnect(ctx)
    """

    def __init__(
        self,
        config: RelayConfig | None = None,
        *,
        id_factory: IdFactory = new_id,
        channel: Channel | None = None,
    ) -> None:
        self._config = config or RelayConfig()
        self._id_factory = id_factory
        self.channel: Channel = channel if channel is not None else QueueChannel(max_queue=self._config.max_queue)
        self.registry = ConnectionRegistry()
        self.cache = StateCache()
        self.router = MessageRouter(
            registry=self.registry,
            cache=self.cache,
            channel=self.channel,
            id_factory=id_factory,
            log_verbose=self._config.log_verbose,
            truncate_length=self._config.truncate_length,
        )
        self.lifecycle = SessionLifecycle(
            registry=self.registry,
            cache=self.cache,
            channel=self.channel,
            id_factory=id_factory,
        )

    @property
    def config(self) -> RelayConfig:
        return self._config

    def new_session(self, role: Role) -> Session:
        return Session(id=self._id_factory(), role=role)

    def connect(self, role_or_session: Role | Session) -> SessionContext | None:
        session = role_or_session if isinstance(role_or_session, Session) else self.new_session(role_or_session)
        return self.lifecycle.connect(session)

    def disconnect(self, context: SessionContext) -> None:
        self.lifecycle.disconnect(context)

    def route(self, session: Session, message: Message) -> RouteResult:
        if session.role == Role.PRODUCER:
            return self.router.route_from_producer(message)
        return self.router.route_from_consumer(message)

    def handle_frame(self, session: Session, event: str, payload: dict[str, Any]) -> RouteResult | None:
        """Route an already-decoded frame. Unknown events are logged and dropped."""
        kind = kind_for_event(event)
        if kind is None:
            _logger.warning("Unknown event %r from %s %s; dropped", event, session.role, session.id)
            return None
        return self.route(session, Message.from_payload(kind, payload))

    def status(self) -> dict[str, object]:
        """Counts and cache flags, as served by the health endpoint."""
        return {
            "producers": self.registry.count_of(Role.PRODUCER),
            "consumers": self.registry.count_of(Role.CONSUMER),
            "inspected": self.cache.has_inspected,
            "document": self.cache.has_document,
        }

    def reset(self) -> None:
        self.cache.reset()
        _logger.debug("State cache reset")
