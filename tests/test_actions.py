"""Tests for the request action builders."""

from __future__ import annotations

import pytest

from pyrelay.models import actions


class TestNodeIdCoercion:
    @pytest.mark.parametrize("value", [12, 12.0, "12", " 12 ", "12.0"])
    def test_numeric_forms_become_int(self, value: object) -> None:
        action = actions.set_inspection_root(value)  # type: ignore[arg-type]
        assert action == {"type": "SET_INSPECTION_ROOT", "data": {"nodeId": 12}}
        assert isinstance(action["data"]["nodeId"], int)

    @pytest.mark.parametrize("value", ["abc", 1.5, None, True])
    def test_non_numeric_rejected(self, value: object) -> None:
        with pytest.raises(ValueError):
            actions.prune_node(value)  # type: ignore[arg-type]


class TestShapes:
    def test_single_node_actions(self) -> None:
        assert actions.toggle_select_node(3)["type"] == "TOGGLE_SELECT_NODE"
        assert actions.prune_node(3) == {"type": "PRUNE_NODE", "data": {"nodeId": 3}}
        assert actions.request_style_for_node("4") == {"type": "REQUEST_STYLE_FOR_NODE", "data": {"nodeId": 4}}

    def test_highlight_with_and_without_selector(self) -> None:
        assert actions.highlight_node(3) == {"type": "HIGHLIGHT_NODE", "data": {"nodeId": 3}}
        assert actions.highlight_node(3, ".a, .b") == {
            "type": "HIGHLIGHT_NODE",
            "data": {"nodeId": 3, "selectorList": ".a, .b"},
        }

    def test_clear_highlight_has_no_data(self) -> None:
        assert actions.clear_highlight() == {"type": "CLEAR_HIGHLIGHT"}

    @pytest.mark.parametrize(
        ("builder", "action_type"),
        [
            (actions.toggle_css_property, "TOGGLE_CSS_PROPERTY"),
            (actions.compute_dependencies, "COMPUTE_DEPENDENCIES"),
        ],
    )
    def test_property_actions(self, builder, action_type: str) -> None:  # type: ignore[no-untyped-def]
        assert builder("8", 1, 2) == {
            "type": action_type,
            "data": {"nodeId": 8, "ruleIndex": 1, "propertyIndex": 2},
        }

    def test_negative_indexes_rejected(self) -> None:
        with pytest.raises(ValueError):
            actions.toggle_css_property(8, -1, 0)

    def test_action_types_cover_all_builders(self) -> None:
        assert {t.value for t in actions.ActionType} == {
            "SET_INSPECTION_ROOT",
            "TOGGLE_SELECT_NODE",
            "PRUNE_NODE",
            "HIGHLIGHT_NODE",
            "CLEAR_HIGHLIGHT",
            "REQUEST_STYLE_FOR_NODE",
            "TOGGLE_CSS_PROPERTY",
            "COMPUTE_DEPENDENCIES",
        }
