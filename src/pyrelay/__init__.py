"""pyrelay - Relay hub between an inspected runtime and observer clients."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyrelay")
except PackageNotFoundError:
    __version__ = "0+local"

from pyrelay._transport import RelayServer
from pyrelay.channel import Channel, Frame, QueueChannel
from pyrelay.config import RelayConfig
from pyrelay.exceptions import (
    RelayConfigError,
    RelayError,
    RelayProtocolError,
    RelayTransportError,
)
from pyrelay.hub import RelayHub
from pyrelay.lifecycle import SessionContext, SessionLifecycle
from pyrelay.models import (
    DocumentUpdate,
    Message,
    MessageKind,
    RootUpdate,
    StylesUpdate,
    UpdateKind,
)
from pyrelay.registry import ConnectionRegistry, RegistryResult, SessionError
from pyrelay.router import MessageRouter, RouteResult
from pyrelay.session import Role, Session
from pyrelay.state.cache import InspectedNode, StateCache

__all__ = [
    "__version__",
    "Channel",
    "ConnectionRegistry",
    "DocumentUpdate",
    "Frame",
    "InspectedNode",
    "Message",
    "MessageKind",
    "MessageRouter",
    "QueueChannel",
    "RegistryResult",
    "RelayConfig",
    "RelayConfigError",
    "RelayError",
    "RelayHub",
    "RelayProtocolError",
    "RelayServer",
    "RelayTransportError",
    "Role",
    "RootUpdate",
    "RouteResult",
    "Session",
    "SessionContext",
    "SessionError",
    "SessionLifecycle",
    "StateCache",
    "StylesUpdate",
    "UpdateKind",
]
