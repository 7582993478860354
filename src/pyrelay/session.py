"""Connection session identity."""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

IdFactory = Callable[[], str]


def new_id() -> str:
    """Default identifier factory: a random UUID4 in hex form."""
    return uuid.uuid4().hex


class Role(StrEnum):
    PRODUCER = "producer"
    CONSUMER = "consumer"


class Session(BaseModel):
    """A live websocket connection.

    Parameters
    ----------
    id : str
        Identifier assigned at connect time. Never reused, a reconnect
        always gets a new one.
    role : Role
        Producer (the inspected page) or consumer (an observer app).
    connected_at : float
        Monotonic timestamp (``time.monotonic()``) of the connect event.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_default=True,
        str_strip_whitespace=True,
    )

    id: str
    role: Role
    connected_at: float = Field(default_factory=time.monotonic)

    @field_validator("id")
    @classmethod
    def _id_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("session id must be non-empty")
        return value

    @property
    def age(self) -> float:
        """Seconds since the session connected."""
        return time.monotonic() - self.connected_at
