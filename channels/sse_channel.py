"""
SseChannel - MCP over Server-Sent Events, served by FastAPI + uvicorn.

At most one SSE session is active per process.  ``SessionRegistry`` holds
that slot plus the session-id → transport table used to route posted
messages; it is passed explicitly to the ASGI endpoints below.

Wire layout:
    GET  /sse                      - open the event stream (409 if a session is active)
    POST /messages/{session_id}    - client → server messages for that session
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
from uuid import uuid4

import uvicorn
from fastmcp import FastMCP
from mcp.server.sse import SseServerTransport
from pydantic import PrivateAttr

from core.errors import RoutingError, TransportConflictError
from core.logging_core import log_info, log_warning

from .base import BaseChannel

MESSAGES_PATH = "/messages"

TransportFactory = Callable[[str], SseServerTransport]


def default_transport_factory(session_id: str) -> SseServerTransport:
    return SseServerTransport(f"{MESSAGES_PATH}/{session_id}")


@dataclass(frozen=True)
class SseSession:
    session_id: str
    transport: SseServerTransport


class SessionRegistry:
    """Single-slot admission control plus session routing table."""

    def __init__(self, transport_factory: TransportFactory = default_transport_factory) -> None:
        self._transport_factory = transport_factory
        self._sessions: dict[str, SseSession] = {}
        self._active: str | None = None

    @property
    def active(self) -> SseSession | None:
        return self._sessions.get(self._active) if self._active else None

    def __len__(self) -> int:
        return len(self._sessions)

    def admit(self) -> SseSession:
        """Open a new session, or refuse if one is already active.

        Raises:
            TransportConflictError: a session already holds the slot.
        """
        if self._active is not None:
            raise TransportConflictError()

        session_id = uuid4().hex
        session = SseSession(session_id=session_id, transport=self._transport_factory(session_id))
        self._sessions[session_id] = session
        self._active = session_id
        log_info(__name__, "SSE session %s opened", session_id)
        return session

    def resolve(self, session_id: str | None) -> SseServerTransport:
        if not session_id:
            raise RoutingError("Missing sessionId", status_code=400)
        session = self._sessions.get(session_id)
        if session is None:
            raise RoutingError("Unknown session", status_code=404)
        return session.transport

    def release(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            return
        if self._active == session_id:
            self._active = None
        log_info(__name__, "SSE session %s closed", session_id)

    def clear(self) -> None:
        for session_id in list(self._sessions):
            self.release(session_id)


# ── ASGI endpoints ───────────────────────────────────────────────────────────


class SseEndpoint:
    """``GET /sse`` - admit a session and run the MCP server over it."""

    def __init__(self, registry: SessionRegistry, server: FastMCP) -> None:
        self.registry = registry
        self.server = server

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        session = self.registry.admit()
        try:
            async with session.transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
                low_level = self.server._mcp_server
                await low_level.run(read_stream, write_stream, low_level.create_initialization_options())
        finally:
            self.registry.release(session.session_id)


class MessageEndpoint:
    """``POST /messages/{session_id}`` - hand the request to the session's transport."""

    def __init__(self, registry: SessionRegistry) -> None:
        self.registry = registry

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        session_id = (scope.get("path_params") or {}).get("session_id")
        transport = self.registry.resolve(session_id)
        await transport.handle_post_message(scope, receive, send)


# ── channel ──────────────────────────────────────────────────────────────────


class SseChannel(BaseChannel):
    """HTTP channel: FastAPI app with SSE + message endpoints under uvicorn."""

    name: str = "sse"
    host: str = "127.0.0.1"
    port: int = 3333
    log_level: str = "info"

    _registry: SessionRegistry = PrivateAttr(default_factory=SessionRegistry)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    def build_app(self):
        from app.main import create_app

        return create_app(self.server, self._registry)

    def _shutdown_impl(self) -> None:
        if len(self._registry):
            log_warning(__name__, "Dropping %d open SSE session(s)", len(self._registry))
        self._registry.clear()

    async def serve(self) -> None:
        await self.initialize()
        config = uvicorn.Config(self.build_app(), host=self.host, port=self.port, log_level=self.log_level.lower())
        log_info(__name__, "SSE server listening on http://%s:%d", self.host, self.port)
        log_info(__name__, "SSE endpoint: http://%s:%d/sse", self.host, self.port)
        try:
            await uvicorn.Server(config).serve()
        finally:
            await self.shutdown()
