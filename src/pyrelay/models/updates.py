"""Producer update bodies.

The producer pushes three kinds of state updates, selected by the
``type`` key of the body. Unknown types are valid on the wire; they are
broadcast but never touch the cache, so :func:`parse_update` returns
``None`` for them.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter, field_validator

from pyrelay.models._base import RelayBaseModel, to_int


class UpdateKind(StrEnum):
    ROOT = "UPDATE_ROOT"
    DOCUMENT = "UPDATE_DOCUMENT"
    STYLES = "UPDATE_STYLES"


class RootUpdate(RelayBaseModel):
    """The producer switched the inspected node."""

    type: Literal["UPDATE_ROOT"] = "UPDATE_ROOT"
    node_id: int
    node: Any = None
    styles: Any = None

    @field_validator("node_id", mode="before")
    @classmethod
    def _coerce_node_id(cls, value: Any) -> int:
        return to_int(value)


class DocumentUpdate(RelayBaseModel):
    """A full document tree."""

    type: Literal["UPDATE_DOCUMENT"] = "UPDATE_DOCUMENT"
    nodes: Any = None


class StylesUpdate(RelayBaseModel):
    """Recomputed styles keyed by node id.

    JSON object keys are always strings, so keys are normalised to
    ``str`` and :meth:`styles_for` accepts either form.
    """

    type: Literal["UPDATE_STYLES"] = "UPDATE_STYLES"
    updated: dict[str, Any] = Field(default_factory=dict)

    @field_validator("updated", mode="before")
    @classmethod
    def _stringify_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(key): styles for key, styles in value.items()}
        return value

    def styles_for(self, node_id: int | str) -> Any:
        return self.updated.get(str(node_id))

    def has_styles_for(self, node_id: int | str) -> bool:
        return self.updated.get(str(node_id)) is not None


Update = Annotated[RootUpdate | DocumentUpdate | StylesUpdate, Field(discriminator="type")]

_UPDATE_KINDS = frozenset(kind.value for kind in UpdateKind)

_UPDATE_ADAPTER: TypeAdapter[RootUpdate | DocumentUpdate | StylesUpdate] = TypeAdapter(Update)


def parse_update(body: dict[str, Any]) -> RootUpdate | DocumentUpdate | StylesUpdate | None:
    """Parse an update body.

    Returns ``None`` for bodies whose ``type`` is not a known
    :class:`UpdateKind`. Raises :class:`pydantic.ValidationError` when the
    type is known but the fields are malformed.
    """
    kind = body.get("type")
    if not isinstance(kind, str) or kind not in _UPDATE_KINDS:
        return None
    return _UPDATE_ADAPTER.validate_python(body)
