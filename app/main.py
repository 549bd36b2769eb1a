"""
FastAPI backend for the HTTP (SSE) channel.

Routes:
    GET  /health                   - liveness + whether an SSE session is open
    GET  /sse                      - MCP event stream (single session)
    POST /messages/{session_id}    - MCP client messages
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from fastmcp import FastMCP

from channels.sse_channel import MESSAGES_PATH, MessageEndpoint, SessionRegistry, SseEndpoint
from core.errors import ToolError
from core.logging_core import log_info, log_warning


async def _tool_error_handler(request: Request, exc: ToolError) -> PlainTextResponse:
    log_warning(__name__, "%s %s -> %d", request.method, request.url.path, exc.status_code, meta=exc.to_payload())
    return PlainTextResponse(exc.error_message, status_code=exc.status_code)


def create_app(server: FastMCP, registry: SessionRegistry) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log_info(__name__, "HTTP channel ready for %s", server.name)
        try:
            yield
        finally:
            registry.clear()
            log_info(__name__, "HTTP channel stopped")

    app = FastAPI(title="Flutter Check Design MCP", lifespan=lifespan)
    app.add_exception_handler(ToolError, _tool_error_handler)

    app.add_route("/sse", SseEndpoint(registry, server), methods=["GET"])
    message_endpoint = MessageEndpoint(registry)
    app.add_route(f"{MESSAGES_PATH}/{{session_id}}", message_endpoint, methods=["POST"])
    app.add_route(MESSAGES_PATH, message_endpoint, methods=["POST"])

    @app.get("/health")
    async def health():
        return {"status": "ok", "server": server.name, "active_session": registry.active is not None}

    return app
