"""Tests for message and update payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pyrelay.models.messages import Message, MessageKind, kind_for_event, router_error
from pyrelay.models.updates import DocumentUpdate, RootUpdate, StylesUpdate, parse_update
from pyrelay.session import Role, Session


class TestMessage:
    def test_event_names(self) -> None:
        assert {kind: Message(kind=kind).event for kind in MessageKind} == {
            MessageKind.REQUEST: "data.req",
            MessageKind.RESPONSE: "data.res",
            MessageKind.UPDATE: "data.update",
            MessageKind.PRODUCER_ERROR: "data.err",
            MessageKind.ROUTER_ERROR: "server.err",
        }
        assert kind_for_event("data.req") == MessageKind.REQUEST
        assert kind_for_event("data.unknown") is None

    def test_payload_without_id_stays_without_id(self) -> None:
        message = Message.from_payload(MessageKind.UPDATE, {"type": "UPDATE_DOCUMENT"})

        assert message.correlation_id is None
        assert message.to_payload() == {"type": "UPDATE_DOCUMENT"}

    def test_with_correlation_id_returns_copy(self) -> None:
        message = Message(kind=MessageKind.UPDATE, body={"type": "X"})

        stamped = message.with_correlation_id("abc")

        assert stamped.correlation_id == "abc"
        assert message.correlation_id is None

    def test_integer_ids_pass_through(self) -> None:
        message = Message.from_payload(MessageKind.RESPONSE, {"id": 42, "result": None})

        assert message.correlation_id == 42
        assert message.to_payload()["id"] == 42

    def test_router_error_shape(self) -> None:
        assert router_error("r1").to_payload() == {
            "type": "SERVER_ERROR",
            "id": "r1",
            "message": "no available producer",
        }


class TestUpdates:
    def test_root_update_coerces_node_id(self) -> None:
        update = parse_update({"type": "UPDATE_ROOT", "nodeId": "5", "node": {}, "styles": []})

        assert isinstance(update, RootUpdate)
        assert update.node_id == 5

    def test_document_update(self) -> None:
        update = parse_update({"type": "UPDATE_DOCUMENT", "nodes": {"1": {}}})

        assert isinstance(update, DocumentUpdate)
        assert update.nodes == {"1": {}}

    def test_styles_lookup_accepts_int_or_str(self) -> None:
        update = parse_update({"type": "UPDATE_STYLES", "updated": {7: "S", "8": None}})

        assert isinstance(update, StylesUpdate)
        assert update.styles_for(7) == update.styles_for("7") == "S"
        assert update.has_styles_for(7)
        assert not update.has_styles_for(8)
        assert not update.has_styles_for(9)

    def test_unknown_type_is_none(self) -> None:
        assert parse_update({"type": "UPDATE_FUTURE"}) is None
        assert parse_update({}) is None

    @pytest.mark.parametrize("kind", [[1], {"a": 1}, 7, None])
    def test_non_string_type_is_none(self, kind: object) -> None:
        assert parse_update({"type": kind}) is None

    def test_malformed_known_type_raises(self) -> None:
        with pytest.raises(ValidationError):
            parse_update({"type": "UPDATE_STYLES", "updated": "nope"})


class TestSession:
    def test_session_is_frozen(self) -> None:
        session = Session(id="s1", role=Role.PRODUCER)

        with pytest.raises(ValidationError):
            session.id = "s2"  # type: ignore[misc]
        assert session.age >= 0

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Session(id="  ", role=Role.CONSUMER)
