"""Server configuration for pyrelay."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pyrelay._constants import CONSUMER_PATH, DEFAULT_HOST, DEFAULT_PORT, PRODUCER_PATH, TRUNCATE_LENGTH
from pyrelay.exceptions import RelayConfigError


def _env_bool(name: str, value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    raise RelayConfigError(f"{name} must be a boolean, got {value!r}")


def _env_number(name: str, value: str, cast: type[int] | type[float]) -> int | float:
    try:
        return cast(value)
    except ValueError as exc:
        raise RelayConfigError(f"{name} must be a number, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class RelayConfig:
    """Relay server configuration.

    Parameters
    ----------
    host : str
        Bind address for the websocket server.
    port : int
        Bind port. Defaults to ``1111``.
    producer_path : str
        Websocket path the inspected browser page connects to.
    consumer_path : str
        Websocket path observer apps connect to.
    log_verbose : bool
        Log forwarded payloads in full instead of a truncated preview.
    truncate_length : int
        Number of characters kept in non-verbose payload previews.
    max_queue : int
        Per-session outbound queue bound. ``0`` means unbounded; with a
        bound, frames for a session whose queue is full are dropped.
    heartbeat : float or None
        Websocket ping interval in seconds, ``None`` to disable.
    """

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    producer_path: str = PRODUCER_PATH
    consumer_path: str = CONSUMER_PATH
    log_verbose: bool = False
    truncate_length: int = TRUNCATE_LENGTH
    max_queue: int = 0
    heartbeat: float | None = None

    def __post_init__(self) -> None:
        if not 0 <= self.port <= 65535:
            raise RelayConfigError(f"port must be between 0 and 65535, got {self.port}")
        for name in ("producer_path", "consumer_path"):
            path = getattr(self, name)
            if not path.startswith("/"):
                raise RelayConfigError(f"{name} must start with '/', got {path!r}")
        if self.producer_path == self.consumer_path:
            raise RelayConfigError("producer_path and consumer_path must differ")
        if self.truncate_length < 0:
            raise RelayConfigError("truncate_length must be >= 0")
        if self.max_queue < 0:
            raise RelayConfigError("max_queue must be >= 0")
        if self.heartbeat is not None and self.heartbeat <= 0:
            raise RelayConfigError("heartbeat must be positive when set")

    @classmethod
    def from_env(cls, **overrides: Any) -> RelayConfig:
        """Create configuration from environment variables.

        Reads optional ``PYRELAY_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        RelayConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "PYRELAY_HOST": "host",
            "PYRELAY_PRODUCER_PATH": "producer_path",
            "PYRELAY_CONSUMER_PATH": "consumer_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        _ENV_INT_MAP = {
            "PYRELAY_PORT": "port",
            "PYRELAY_TRUNCATE_LENGTH": "truncate_length",
            "PYRELAY_MAX_QUEUE": "max_queue",
        }
        for env_key, field_name in _ENV_INT_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, int)

        heartbeat_env = env.get("PYRELAY_HEARTBEAT")
        if heartbeat_env is not None and "heartbeat" not in overrides:
            config_kwargs["heartbeat"] = _env_number("PYRELAY_HEARTBEAT", heartbeat_env, float) or None

        if "log_verbose" not in overrides:
            config_kwargs["log_verbose"] = _env_bool("PYRELAY_LOG_VERBOSE", env.get("PYRELAY_LOG_VERBOSE"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
