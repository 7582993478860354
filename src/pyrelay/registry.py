"""Live session bookkeeping per role.

Registry violations are returned as :class:`RegistryResult` values rather
than raised; the caller decides how loudly to report them.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pyrelay.session import Role


class SessionError(StrEnum):
    DUPLICATE_SESSION = "duplicate_session"
    UNKNOWN_SESSION = "unknown_session"


@dataclass(frozen=True, slots=True)
class RegistryResult:
    """Outcome of a register/unregister call.

    ``producers`` and ``consumers`` are the counts after the call, which
    are unchanged when ``error`` is set.
    """

    producers: int
    consumers: int
    error: SessionError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ConnectionRegistry:
    """Set of connected session ids for each role."""

    def __init__(self) -> None:
        self._sessions: dict[Role, set[str]] = {role: set() for role in Role}

    def _result(self, error: SessionError | None = None) -> RegistryResult:
        return RegistryResult(
            producers=len(self._sessions[Role.PRODUCER]),
            consumers=len(self._sessions[Role.CONSUMER]),
            error=error,
        )

    def register(self, session_id: str, role: Role) -> RegistryResult:
        live = self._sessions[role]
        if session_id in live:
            return self._result(SessionError.DUPLICATE_SESSION)
        live.add(session_id)
        return self._result()

    def unregister(self, session_id: str, role: Role) -> RegistryResult:
        live = self._sessions[role]
        if session_id not in live:
            return self._result(SessionError.UNKNOWN_SESSION)
        live.remove(session_id)
        return self._result()

    def count_of(self, role: Role) -> int:
        return len(self._sessions[role])

    def has_any(self, role: Role) -> bool:
        return bool(self._sessions[role])

    def sessions(self, role: Role) -> frozenset[str]:
        """Snapshot of the live ids for *role*."""
        return frozenset(self._sessions[role])
