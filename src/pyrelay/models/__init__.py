"""Payload models for relay messages, producer updates and request actions."""

from pyrelay.models._base import RelayBaseModel, to_int
from pyrelay.models.actions import (
    ActionType,
    clear_highlight,
    compute_dependencies,
    highlight_node,
    prune_node,
    request_style_for_node,
    set_inspection_root,
    toggle_css_property,
    toggle_select_node,
)
from pyrelay.models.messages import CorrelationId, Message, MessageKind, kind_for_event, router_error
from pyrelay.models.updates import DocumentUpdate, RootUpdate, StylesUpdate, UpdateKind, parse_update

__all__ = [
    "ActionType",
    "CorrelationId",
    "DocumentUpdate",
    "Message",
    "MessageKind",
    "RelayBaseModel",
    "RootUpdate",
    "StylesUpdate",
    "UpdateKind",
    "clear_highlight",
    "compute_dependencies",
    "highlight_node",
    "kind_for_event",
    "parse_update",
    "prune_node",
    "request_style_for_node",
    "router_error",
    "set_inspection_root",
    "to_int",
    "toggle_css_property",
    "toggle_select_node",
]
