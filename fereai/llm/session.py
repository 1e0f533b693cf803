# fereai/llm/session.py
"""
One websocket, one request, one outcome.

The FereAI backend answers over a streaming socket: the client sends a single
JSON payload once the connection opens, the server pushes any number of
frames, then closes. WebSocketSession turns that exchange into a single
awaitable result using an explicit state machine:

    CONNECTING -> OPEN -> RECEIVING* -> CLOSED_SUCCESS | CLOSED_EMPTY
         any state ------------------> ERRORED

- Every frame that parses as a JSON object replaces the captured envelope
  (last frame wins).
- The outcome is settled exactly once; later frames/signals are ignored.
- There is no timeout: wrap execute() in asyncio.wait_for to bound it.
  Cancelling execute() closes the socket before the cancellation propagates.
"""
from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any, Optional, Protocol

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from fereai.agent.router import redact_url
from fereai.agent.types import Route
from fereai.errors import EmptyResponseError, FereAIError, FrameDecodeError, TransportError
from fereai.obs.metrics import FRAMES, SESSION_LATENCY, SESSIONS
from fereai.obs.tracing import get_tracer

log = logging.getLogger(__name__)
tracer = get_tracer(__name__)

TRANSPORT_ERRORS = (OSError, asyncio.TimeoutError, WebSocketException)


class Connection(Protocol):
    async def send(self, message: str) -> None: ...

    async def recv(self) -> str | bytes: ...

    async def close(self) -> None: ...


Connector = Callable[[str], Awaitable[Connection]]


class SessionState(Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    RECEIVING = "receiving"
    CLOSED_SUCCESS = "closed_success"
    CLOSED_EMPTY = "closed_empty"
    ERRORED = "errored"


class WebSocketSession:
    """Owns exactly one connection for the lifetime of one execute() call."""

    def __init__(self, url: str, route: Optional[Route] = None, *, connect: Optional[Connector] = None):
        self.url = url
        self.route = route
        self._connect = connect or websockets.connect
        self.state = SessionState.CONNECTING
        self.envelope: Optional[dict[str, Any]] = None
        self.frames = 0
        self._ws: Optional[Connection] = None
        self._outcome: Optional[asyncio.Future] = None
        self._used = False

    @property
    def settled(self) -> bool:
        return self._outcome is not None and self._outcome.done()

    @property
    def _route_label(self) -> str:
        return self.route.name if self.route else "unknown"

    async def execute(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Connect, send payload once, collect frames until close; return the last envelope."""
        if self._used:
            raise RuntimeError("WebSocketSession is single-use")
        self._used = True
        self._outcome = asyncio.get_running_loop().create_future()
        started = time.perf_counter()

        with tracer.start_as_current_span(
            "fereai.session", attributes={"fereai.route": self._route_label}
        ) as span:
            try:
                await self._drive(payload)
            except asyncio.CancelledError:
                log.debug("session cancelled in state %s; closing socket", self.state.value)
                await self._force_close()
                raise
            finally:
                SESSION_LATENCY.labels(route=self._route_label).observe(time.perf_counter() - started)
                span.set_attribute("fereai.outcome", self.state.value)
                span.set_attribute("fereai.frames", self.frames)
            return await self._outcome

    # ---------------- driver ----------------
    async def _drive(self, payload: dict[str, Any]) -> None:
        log.debug("connecting %s", redact_url(self.url))
        try:
            self._ws = await self._connect(self.url)
        except TRANSPORT_ERRORS as exc:
            await self._on_error(exc)
            return

        try:
            await self._on_open(payload)
            while not self.settled:
                try:
                    frame = await self._ws.recv()
                except ConnectionClosed as closed:
                    self._on_close(closed)
                    break
                await self._on_message(frame)
        except ConnectionClosed as closed:
            # closed while sending
            self._on_close(closed)
        except TRANSPORT_ERRORS as exc:
            await self._on_error(exc)

    # ---------------- transitions ----------------
    async def _on_open(self, payload: dict[str, Any]) -> None:
        self.state = SessionState.OPEN
        body = json.dumps(payload)
        log.debug("sending payload: %s", body)
        await self._ws.send(body)
        self.state = SessionState.RECEIVING

    async def _on_message(self, frame: str | bytes) -> None:
        if self.settled:
            return
        self.frames += 1
        FRAMES.labels(route=self._route_label).inc()

        text = frame.decode("utf-8", errors="replace") if isinstance(frame, bytes) else frame
        log.debug("received frame #%d: %s", self.frames, text[:200])
        if not text.strip().startswith("{"):
            return
        try:
            parsed = json.loads(text)
        except ValueError as exc:
            self._reject(FrameDecodeError(f"Invalid JSON frame: {exc}"), exc)
            await self._force_close()
            return
        if isinstance(parsed, dict):
            self.envelope = parsed

    async def _on_error(self, exc: BaseException) -> None:
        self._reject(TransportError(f"WebSocket error: {exc}"), exc)
        await self._force_close()

    def _on_close(self, closed: ConnectionClosed) -> None:
        log.debug("connection closed: %s (frames=%d)", closed, self.frames)
        if self.envelope is not None:
            self._resolve(self.envelope)
        else:
            self._reject(EmptyResponseError("WebSocket closed without receiving valid response"))

    # ---------------- settlement ----------------
    def _resolve(self, envelope: dict[str, Any]) -> None:
        if self.settled:
            return
        self.state = SessionState.CLOSED_SUCCESS
        SESSIONS.labels(route=self._route_label, outcome="ok").inc()
        self._outcome.set_result(envelope)

    def _reject(self, error: FereAIError, cause: Optional[BaseException] = None) -> None:
        if self.settled:
            return
        if cause is not None:
            error.__cause__ = cause
        if isinstance(error, EmptyResponseError):
            self.state, outcome = SessionState.CLOSED_EMPTY, "empty"
        else:
            self.state = SessionState.ERRORED
            outcome = "decode_error" if isinstance(error, FrameDecodeError) else "transport_error"
        SESSIONS.labels(route=self._route_label, outcome=outcome).inc()
        self._outcome.set_exception(error)

    async def _force_close(self) -> None:
        if self._ws is None:
            return
        # the outcome is already settled; a failing close has nothing left to report
        with contextlib.suppress(*TRANSPORT_ERRORS):
            await self._ws.close()
