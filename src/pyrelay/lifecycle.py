"""Connect/disconnect handling for relay sessions.

A session moves ``Disconnected -> Connected -> Disconnected`` exactly
once; a reconnect is a new session. Registry violations are reported in
the log and never raised, so one misbehaving connection cannot take the
relay down.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pyrelay.channel import Channel
from pyrelay.exceptions import RelayTransportError
from pyrelay.registry import ConnectionRegistry, RegistryResult
from pyrelay.session import IdFactory, Role, Session, new_id
from pyrelay.state.cache import StateCache

_logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SessionContext:
    """Handed out by :meth:`SessionLifecycle.connect`, handed back on disconnect."""

    session: Session
    registered: RegistryResult
    catch_up_sent: int = 0


def _log_connection(connected: bool, session: Session, result: RegistryResult) -> None:
    _logger.info(
        "%s %s: %s (producers=%d consumers=%d)",
        "Connected to" if connected else "Disconnected from",
        session.role,
        session.id,
        result.producers,
        result.consumers,
    )


class SessionLifecycle:
    """Applies session transitions to the registry and cache."""

    def __init__(
        self,
        *,
        registry: ConnectionRegistry,
        cache: StateCache,
        channel: Channel,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._channel = channel
        self._id_factory = id_factory

    def connect(self, session: Session) -> SessionContext | None:
        """Register *session*; a consumer is then sent the catch-up sequence.

        Returns ``None`` when the id is already live for its role.
        """
        result = self._registry.register(session.id, session.role)
        if not result.ok:
            _logger.warning("Refusing %s %s: %s", session.role, session.id, result.error)
            return None
        _log_connection(True, session, result)

        sent = 0
        if session.role == Role.CONSUMER:
            sent = self._send_catch_up(session)
        return SessionContext(session=session, registered=result, catch_up_sent=sent)

    def _send_catch_up(self, session: Session) -> int:
        sent = 0
        for message in self._cache.snapshot_for_catch_up(self._id_factory):
            _logger.info("Sending cached %s to %s", message.body.get("type"), session.id)
            try:
                self._channel.send(session.id, message.event, message.to_payload())
            except RelayTransportError as exc:
                _logger.warning("Catch-up for %s aborted: %s", session.id, exc)
                break
            sent += 1
        return sent

    def disconnect(self, context: SessionContext) -> RegistryResult:
        session = context.session
        result = self._registry.unregister(session.id, session.role)
        if not result.ok:
            _logger.error("Disconnect for %s %s: %s", session.role, session.id, result.error)
            return result
        _log_connection(False, session, result)

        if session.role == Role.PRODUCER:
            self._cache.on_producer_disconnect()
        return result
