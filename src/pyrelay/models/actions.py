"""Request action builders for consumer clients.

Consumers send these as request bodies; the relay forwards them to the
producer without looking at ``type``. Every builder validates through a
Pydantic data model so node ids arrive as integers whatever form the
caller had them in.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import Field, field_validator

from pyrelay.models._base import RelayBaseModel, to_int


class ActionType(StrEnum):
    SET_INSPECTION_ROOT = "SET_INSPECTION_ROOT"
    TOGGLE_SELECT_NODE = "TOGGLE_SELECT_NODE"
    PRUNE_NODE = "PRUNE_NODE"
    HIGHLIGHT_NODE = "HIGHLIGHT_NODE"
    CLEAR_HIGHLIGHT = "CLEAR_HIGHLIGHT"
    REQUEST_STYLE_FOR_NODE = "REQUEST_STYLE_FOR_NODE"
    TOGGLE_CSS_PROPERTY = "TOGGLE_CSS_PROPERTY"
    COMPUTE_DEPENDENCIES = "COMPUTE_DEPENDENCIES"


class NodeData(RelayBaseModel):
    """Action data addressing a single node."""

    node_id: int

    @field_validator("node_id", mode="before")
    @classmethod
    def _coerce_node_id(cls, value: Any) -> int:
        return to_int(value)


class HighlightData(NodeData):
    selector_list: str | None = None


class PropertyData(NodeData):
    """Action data addressing one property of one matched rule."""

    rule_index: int = Field(ge=0)
    property_index: int = Field(ge=0)


def _action(action_type: ActionType, data: RelayBaseModel | None = None) -> dict[str, Any]:
    action: dict[str, Any] = {"type": action_type.value}
    if data is not None:
        action["data"] = data.to_wire(exclude_none=True)
    return action


def set_inspection_root(node_id: int | float | str) -> dict[str, Any]:
    return _action(ActionType.SET_INSPECTION_ROOT, NodeData(node_id=node_id))


def toggle_select_node(node_id: int | float | str) -> dict[str, Any]:
    return _action(ActionType.TOGGLE_SELECT_NODE, NodeData(node_id=node_id))


def prune_node(node_id: int | float | str) -> dict[str, Any]:
    return _action(ActionType.PRUNE_NODE, NodeData(node_id=node_id))


def highlight_node(node_id: int | float | str, selector_list: str | None = None) -> dict[str, Any]:
    """Highlight a node, optionally only the parts matching *selector_list*."""
    return _action(ActionType.HIGHLIGHT_NODE, HighlightData(node_id=node_id, selector_list=selector_list))


def clear_highlight() -> dict[str, Any]:
    return _action(ActionType.CLEAR_HIGHLIGHT)


def request_style_for_node(node_id: int | float | str) -> dict[str, Any]:
    return _action(ActionType.REQUEST_STYLE_FOR_NODE, NodeData(node_id=node_id))


def toggle_css_property(node_id: int | float | str, rule_index: int, property_index: int) -> dict[str, Any]:
    return _action(
        ActionType.TOGGLE_CSS_PROPERTY,
        PropertyData(node_id=node_id, rule_index=rule_index, property_index=property_index),
    )


def compute_dependencies(node_id: int | float | str, rule_index: int, property_index: int) -> dict[str, Any]:
    return _action(
        ActionType.COMPUTE_DEPENDENCIES,
        PropertyData(node_id=node_id, rule_index=rule_index, property_index=property_index),
    )
