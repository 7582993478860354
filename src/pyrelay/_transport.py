"""aiohttp websocket server in front of the relay hub."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import weakref
from typing import Any

from aiohttp import WSCloseCode, WSMsgType, web

from pyrelay._codec import decode_frame, encode_frame
from pyrelay.channel import Frame, QueueChannel
from pyrelay.config import RelayConfig
from pyrelay.exceptions import RelayProtocolError
from pyrelay.hub import RelayHub
from pyrelay.session import IdFactory, Role, Session, new_id

_logger = logging.getLogger(__name__)


class RelayServer:
    """Serves the producer and consumer websocket endpoints.

    Each connection gets a :class:`Session`, an outbound queue on the
    shared :class:`QueueChannel` and a writer task. Inbound frames are
    decoded and routed synchronously, so registry and cache updates never
    interleave between connections.
    """

    def __init__(self, config: RelayConfig | None = None, *, id_factory: IdFactory = new_id) -> None:
        self._config = config or RelayConfig()
        self._channel = QueueChannel(max_queue=self._config.max_queue)
        self.hub = RelayHub(self._config, id_factory=id_factory, channel=self._channel)
        self._sockets: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._runner: web.AppRunner | None = None

    @property
    def config(self) -> RelayConfig:
        return self._config

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get(self._config.producer_path, self._handle_producer)
        app.router.add_get(self._config.consumer_path, self._handle_consumer)
        app.router.add_get("/health", self._handle_health)
        app.on_shutdown.append(self._close_sockets)
        return app

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self._config.host, self._config.port)
        await site.start()
        _logger.info("Relay listening on %s:%s", self._config.host, self._config.port)

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        self.hub.reset()

    async def __aenter__(self) -> RelayServer:
        await self.start()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.stop()

    async def _close_sockets(self, _app: web.Application) -> None:
        for ws in set(self._sockets):
            await ws.close(code=WSCloseCode.GOING_AWAY, message=b"Relay shutdown")

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    async def _handle_health(self, _request: web.Request) -> web.Response:
        return web.json_response(self.hub.status())

    async def _handle_producer(self, request: web.Request) -> web.WebSocketResponse:
        return await self._handle_socket(request, role=Role.PRODUCER)

    async def _handle_consumer(self, request: web.Request) -> web.WebSocketResponse:
        return await self._handle_socket(request, role=Role.CONSUMER)

    async def _handle_socket(self, request: web.Request, *, role: Role) -> web.WebSocketResponse:
        ws = web.WebSocketResponse(heartbeat=self._config.heartbeat)
        await ws.prepare(request)

        session = self.hub.new_session(role)
        if self._channel.is_attached(session.id):
            _logger.warning("Refusing %s %s: session id already attached", role, session.id)
            await ws.close(code=WSCloseCode.POLICY_VIOLATION, message=b"Duplicate session")
            return ws
        queue = self._channel.attach(session.id, role)
        context = self.hub.connect(session)
        if context is None:
            self._channel.detach(session.id)
            await ws.close(code=WSCloseCode.POLICY_VIOLATION, message=b"Duplicate session")
            return ws

        self._sockets.add(ws)
        writer = asyncio.create_task(self._write_loop(session, ws, queue))
        try:
            async for msg in ws:
                if msg.type in (WSMsgType.TEXT, WSMsgType.BINARY):
                    self._handle_frame(session, msg.data)
                elif msg.type == WSMsgType.ERROR:
                    _logger.warning("Socket error on %s %s: %s", role, session.id, ws.exception())
        finally:
            self.hub.disconnect(context)
            unsent = self._channel.detach(session.id)
            if unsent:
                _logger.debug("%d frames for %s discarded on disconnect", unsent, session.id)
            writer.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await writer
            self._sockets.discard(ws)
        return ws

    def _handle_frame(self, session: Session, raw: str | bytes) -> None:
        try:
            message = decode_frame(raw, session.role)
        except RelayProtocolError as exc:
            _logger.warning("Dropping frame from %s %s: %s", session.role, session.id, exc)
            return
        self.hub.route(session, message)

    async def _write_loop(self, session: Session, ws: web.WebSocketResponse, queue: asyncio.Queue[Frame]) -> None:
        while True:
            frame = await queue.get()
            if ws.closed:
                return
            try:
                await ws.send_str(encode_frame(frame))
            except ConnectionResetError as exc:
                _logger.warning("Send to %s failed: %s", session.id, exc)
                return


def run(config: RelayConfig | None = None) -> None:
    """Run the relay until interrupted."""
    server = RelayServer(config)
    web.run_app(
        server.build_app(),
        host=server.config.host,
        port=server.config.port,
        print=None,
    )
