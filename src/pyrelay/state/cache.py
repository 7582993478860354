"""Deterministic in-memory snapshot of producer state.

This is the only component allowed to merge producer updates. Writers are
the router's update path and the producer-disconnect path.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from pyrelay.models.messages import Message, MessageKind
from pyrelay.models.updates import DocumentUpdate, RootUpdate, StylesUpdate, UpdateKind, parse_update
from pyrelay.session import IdFactory, new_id

_logger = logging.getLogger(__name__)


class InspectedNode(BaseModel):
    model_config = ConfigDict(extra="forbid")

    node_id: int
    node: Any = None
    styles: Any = None


class StateCache:
    """Last inspected node (with styles) and last document tree.

    Both fields start empty. Payloads are deep-copied on the way in and on
    the way out, so mutating a delivered message never changes the cache.
    """

    def __init__(self) -> None:
        self._inspected: InspectedNode | None = None
        self._document_nodes: Any | None = None

    @property
    def inspected(self) -> InspectedNode | None:
        return self._inspected.model_copy(deep=True) if self._inspected is not None else None

    @property
    def document_nodes(self) -> Any | None:
        return copy.deepcopy(self._document_nodes)

    @property
    def has_inspected(self) -> bool:
        return self._inspected is not None

    @property
    def has_document(self) -> bool:
        return self._document_nodes is not None

    @property
    def is_empty(self) -> bool:
        return not (self.has_inspected or self.has_document)

    def apply_update(self, body: dict[str, Any]) -> bool:
        """Merge an update body into the cache.

        Returns ``True`` when cached state changed. Unknown and malformed
        updates leave the cache untouched; they are still broadcast by the
        router.
        """
        try:
            update = parse_update(body)
        except ValidationError as exc:
            _logger.warning("Ignoring malformed %s update: %s", body.get("type"), exc.errors(include_url=False))
            return False

        if update is None:
            _logger.debug("Update type %r not cached", body.get("type"))
            return False

        if isinstance(update, RootUpdate):
            self._inspected = InspectedNode(
                node_id=update.node_id,
                node=copy.deepcopy(update.node),
                styles=copy.deepcopy(update.styles),
            )
            _logger.info("Inspecting node %s", update.node_id)
            return True

        if isinstance(update, DocumentUpdate):
            self._document_nodes = copy.deepcopy(update.nodes)
            _logger.info("Updated document nodes")
            return True

        if isinstance(update, StylesUpdate):
            # Only styles for the currently inspected node are cached.
            inspected = self._inspected
            if inspected is None or not update.has_styles_for(inspected.node_id):
                _logger.debug("Styles update does not touch inspected node")
                return False
            inspected.styles = copy.deepcopy(update.styles_for(inspected.node_id))
            _logger.info("Updated styles for node %s", inspected.node_id)
            return True

        return False

    def snapshot_for_catch_up(self, id_factory: IdFactory = new_id) -> Iterator[Message]:
        """Yield the catch-up updates for a newly connected consumer.

        ROOT first (if a node is inspected), then DOCUMENT (if a document
        is cached), each with a fresh correlation id. A pure function of
        the current state: every call starts over.
        """
        if self._inspected is not None:
            inspected = self._inspected
            yield Message(
                kind=MessageKind.UPDATE,
                correlation_id=id_factory(),
                body={
                    "type": UpdateKind.ROOT.value,
                    "node": copy.deepcopy(inspected.node),
                    "nodeId": inspected.node_id,
                    "styles": copy.deepcopy(inspected.styles),
                },
            )
        if self._document_nodes is not None:
            yield Message(
                kind=MessageKind.UPDATE,
                correlation_id=id_factory(),
                body={
                    "type": UpdateKind.DOCUMENT.value,
                    "nodes": copy.deepcopy(self._document_nodes),
                },
            )

    def on_producer_disconnect(self) -> None:
        """Forget the inspected node; the document survives for a reconnect."""
        self._inspected = None

    def reset(self) -> None:
        self._inspected = None
        self._document_nodes = None
