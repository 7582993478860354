"""Base model for relay payloads.

Every payload model inherits from :class:`RelayBaseModel` which provides
``alias_generator=to_camel`` so the camelCase keys used on the wire
(``nodeId``, ``ruleIndex``) map to snake_case fields, and dumps back to
camelCase through :meth:`RelayBaseModel.to_wire`.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def to_int(value: Any) -> int:
    """Coerce a node id given as int, integral float or numeric string."""
    if isinstance(value, bool):
        raise ValueError(f"node id must be numeric, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"node id must be integral, got {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            try:
                return to_int(float(text))
            except ValueError:
                raise ValueError(f"node id must be numeric, got {value!r}") from None
    raise ValueError(f"node id must be numeric, got {value!r}")


class RelayBaseModel(BaseModel):
    """Base for wire payload models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self, **kwargs: Any) -> dict[str, Any]:
        """Dump with camelCase keys, as sent on the socket."""
        return self.model_dump(by_alias=True, **kwargs)
