"""Message routing between the producer and consumers.

Owns:
- merging producer updates into the state cache
- stamping correlation ids on producer updates that lack one
- fan-out of every producer reply to every consumer
- forwarding consumer requests, or answering them with a router error
  when no producer is connected
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from pyrelay._constants import NO_PRODUCER_MESSAGE, TRUNCATE_LENGTH
from pyrelay._logfmt import format_payload_for_log
from pyrelay.channel import Channel
from pyrelay.models.messages import Message, MessageKind, router_error
from pyrelay.registry import ConnectionRegistry
from pyrelay.session import IdFactory, Role, new_id
from pyrelay.state.cache import StateCache

_logger = logging.getLogger(__name__)

_PRODUCER_KINDS = frozenset({MessageKind.RESPONSE, MessageKind.UPDATE, MessageKind.PRODUCER_ERROR})


@dataclass(frozen=True, slots=True)
class RouteResult:
    """What happened to one routed message.

    ``delivered`` counts consumer deliveries (including a router error);
    ``forwarded`` is set when a request went to the producer.
    """

    message: Message
    delivered: int = 0
    forwarded: bool = False
    error: str | None = None


class MessageRouter:
    """Directs messages between roles through a :class:`Channel`."""

    def __init__(
        self,
        *,
        registry: ConnectionRegistry,
        cache: StateCache,
        channel: Channel,
        id_factory: IdFactory = new_id,
        log_verbose: bool = False,
        truncate_length: int = TRUNCATE_LENGTH,
    ) -> None:
        self._registry = registry
        self._cache = cache
        self._channel = channel
        self._id_factory = id_factory
        self._log_verbose = log_verbose
        self._truncate_length = truncate_length

    def _preview(self, message: Message) -> str:
        return format_payload_for_log(
            message.to_payload(),
            verbose=self._log_verbose,
            max_length=self._truncate_length,
        )

    def _fan_out(self, message: Message) -> int:
        if _logger.isEnabledFor(logging.DEBUG):
            _logger.debug("%s %s %s", message.event, message.body.get("type"), self._preview(message))
        return self._channel.broadcast(Role.CONSUMER, message.event, message.to_payload())

    def route_from_producer(self, message: Message) -> RouteResult:
        if message.kind not in _PRODUCER_KINDS:
            _logger.warning("Producer sent %s, which is not a producer message; dropped", message.kind)
            return RouteResult(message=message, error=f"unexpected {message.kind} from producer")

        if message.kind == MessageKind.UPDATE:
            self._cache.apply_update(message.body)
            # Updates carry no request id; stamp one before fan-out.
            if message.correlation_id is None:
                message = message.with_correlation_id(self._id_factory())
        elif message.kind == MessageKind.PRODUCER_ERROR:
            _logger.warning("Producer reported error for %s: %s", message.correlation_id, self._preview(message))

        delivered = self._fan_out(message)
        return RouteResult(message=message, delivered=delivered)

    def route_from_consumer(self, message: Message) -> RouteResult:
        if message.kind != MessageKind.REQUEST:
            _logger.warning("Consumer sent %s, which is not a request; dropped", message.kind)
            return RouteResult(message=message, error=f"unexpected {message.kind} from consumer")

        if self._registry.has_any(Role.PRODUCER):
            if _logger.isEnabledFor(logging.DEBUG):
                _logger.debug("%s %s", message.event, self._preview(message))
            self._channel.broadcast(Role.PRODUCER, message.event, message.to_payload())
            return RouteResult(message=message, forwarded=True)

        _logger.info("No available producer for request %s", message.correlation_id)
        error = router_error(message.correlation_id)
        delivered = self._fan_out(error)
        return RouteResult(message=error, delivered=delivered, error=NO_PRODUCER_MESSAGE)
