"""
StdioChannel - line-oriented MCP over the process's stdin/stdout.

Used when the server is spawned by an MCP client.  Nothing else may write
to stdout while it runs; logging is routed to stderr.
"""

from __future__ import annotations

from core.logging_core import log_info

from .base import BaseChannel


class StdioChannel(BaseChannel):
    name: str = "stdio"

    async def serve(self) -> None:
        await self.initialize()
        log_info(__name__, "Serving MCP over stdio")
        try:
            await self.server.run_async(transport="stdio")
        finally:
            await self.shutdown()
