"""Custom exception hierarchy for pyrelay."""

from __future__ import annotations


class RelayError(Exception):
    """Base exception for all pyrelay errors."""


class RelayConfigError(RelayError):
    """Invalid or missing configuration."""


class RelayProtocolError(RelayError):
    """Inbound frame could not be decoded or is not valid for its sender."""

    def __init__(self, message: str, *, event: str = "") -> None:
        self.event = event
        super().__init__(message)


class RelayTransportError(RelayError):
    """Websocket-level failure while delivering to a session."""

    def __init__(self, message: str, *, session_id: str = "") -> None:
        self.session_id = session_id
        super().__init__(message)
