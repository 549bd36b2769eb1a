"""
BaseChannel - abstract interface for the transports that carry MCP traffic.

A channel connects MCP clients to the one ``FastMCP`` server of the
process.  Concrete channels own exactly one transport (stdio, SSE over
HTTP) and follow the ``RuntimeObject`` lifecycle.

Lifecycle:
    1. ``initialize()``  - prepare transport state.
    2. ``serve()``       - run until the client or process goes away.
    3. ``shutdown()``    - tear down cleanly.
"""

from __future__ import annotations

from fastmcp import FastMCP

from core.runtime import RuntimeObject


class BaseChannel(RuntimeObject):
    """Runtime contract for all MCP channels."""

    name: str = "channel"
    server: FastMCP

    async def serve(self) -> None:
        """Serve MCP requests until the transport closes."""
        raise NotImplementedError(f"{self.__class__.__name__} must implement serve().")
