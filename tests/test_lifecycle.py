from __future__ import annotations

import logging

import pytest

from pyrelay.channel import QueueChannel
from pyrelay.lifecycle import SessionContext, SessionLifecycle
from pyrelay.registry import ConnectionRegistry, SessionError
from pyrelay.session import Role, Session
from pyrelay.state.cache import StateCache


def _lifecycle() -> tuple[SessionLifecycle, ConnectionRegistry, StateCache, QueueChannel]:
    registry = ConnectionRegistry()
    cache = StateCache()
    channel = QueueChannel()
    lifecycle = SessionLifecycle(registry=registry, cache=cache, channel=channel, id_factory=lambda: "fresh")
    return lifecycle, registry, cache, channel


def _seed(cache: StateCache) -> None:
    cache.apply_update({"type": "UPDATE_ROOT", "nodeId": 1, "node": {}, "styles": {}})
    cache.apply_update({"type": "UPDATE_DOCUMENT", "nodes": ["root"]})


def test_consumer_connect_sends_catch_up_to_that_consumer_only() -> None:
    lifecycle, _, cache, channel = _lifecycle()
    _seed(cache)
    existing = Session(id="c1", role=Role.CONSUMER)
    existing_queue = channel.attach(existing.id, existing.role)
    assert lifecycle.connect(existing) is not None
    while not existing_queue.empty():
        existing_queue.get_nowait()

    newcomer = Session(id="c2", role=Role.CONSUMER)
    queue = channel.attach(newcomer.id, newcomer.role)
    context = lifecycle.connect(newcomer)

    assert context is not None
    assert context.catch_up_sent == 2
    frames = [queue.get_nowait(), queue.get_nowait()]
    assert [f.data["type"] for f in frames] == ["UPDATE_ROOT", "UPDATE_DOCUMENT"]
    assert existing_queue.empty()


def test_producer_connect_sends_no_catch_up() -> None:
    lifecycle, _, cache, channel = _lifecycle()
    _seed(cache)
    producer = Session(id="p1", role=Role.PRODUCER)
    queue = channel.attach(producer.id, producer.role)

    context = lifecycle.connect(producer)

    assert context is not None and context.catch_up_sent == 0
    assert queue.empty()


def test_duplicate_connect_is_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    lifecycle, registry, _, channel = _lifecycle()
    session = Session(id="c1", role=Role.CONSUMER)
    channel.attach(session.id, session.role)
    lifecycle.connect(session)

    with caplog.at_level(logging.WARNING):
        assert lifecycle.connect(session) is None

    assert registry.count_of(Role.CONSUMER) == 1
    assert SessionError.DUPLICATE_SESSION in caplog.text


def test_unknown_disconnect_is_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    lifecycle, registry, _, _ = _lifecycle()
    session = Session(id="ghost", role=Role.CONSUMER)
    context = SessionContext(session=session, registered=registry.register("other", Role.CONSUMER))

    with caplog.at_level(logging.ERROR):
        result = lifecycle.disconnect(context)

    assert result.error == SessionError.UNKNOWN_SESSION
    assert registry.count_of(Role.CONSUMER) == 1
    assert "ghost" in caplog.text


def test_producer_disconnect_clears_inspected_but_keeps_document() -> None:
    lifecycle, registry, cache, _ = _lifecycle()
    context = lifecycle.connect(Session(id="p1", role=Role.PRODUCER))
    assert context is not None
    _seed(cache)

    lifecycle.disconnect(context)

    assert registry.count_of(Role.PRODUCER) == 0
    assert cache.inspected is None
    assert cache.document_nodes == ["root"]


def test_consumer_disconnect_keeps_cache() -> None:
    lifecycle, _, cache, channel = _lifecycle()
    _seed(cache)
    session = Session(id="c1", role=Role.CONSUMER)
    channel.attach(session.id, session.role)
    context = lifecycle.connect(session)
    assert context is not None

    lifecycle.disconnect(context)

    assert cache.has_inspected and cache.has_document


def test_catch_up_to_unattached_session_is_abandoned(caplog: pytest.LogCaptureFixture) -> None:
    lifecycle, registry, cache, _ = _lifecycle()
    _seed(cache)

    with caplog.at_level(logging.WARNING):
        context = lifecycle.connect(Session(id="c1", role=Role.CONSUMER))

    assert context is not None
    assert context.catch_up_sent == 0
    assert registry.count_of(Role.CONSUMER) == 1
    assert "not attached" in caplog.text
