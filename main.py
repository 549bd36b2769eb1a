"""CLI entrypoint - pick a channel and run the MCP server."""

from __future__ import annotations

import asyncio
import sys
from typing import Sequence

from app.server import build_mcp_server
from channels import SseChannel, StdioChannel
from core.config import ServerConfig, get_server_config, log_config_sources
from core.logging_core import configure_logging, log_exception

_MODES_HELP = """\
Starting Flutter Check Design MCP Server...

Available modes:
  --stdio   MCP client communication
  --http    Local testing via HTTP (SSE)
  --remote  Remote deployment (HTTP on all interfaces)

Choose your iPhone device: run `xcrun simctl list`
"""


async def serve(config: ServerConfig) -> bool:
    """Run the configured channel. Returns False when no mode was selected."""
    server = build_mcp_server()

    if config.is_stdio_mode:
        await StdioChannel(server=server).serve()
        return True

    if config.is_http_mode:
        if config.is_remote_mode:
            print("Starting Flutter Check Design MCP Server in REMOTE mode...", file=sys.stderr)
        else:
            print("Starting Flutter Check Design MCP Server in HTTP mode...", file=sys.stderr)
        channel = SseChannel(
            server=server,
            host=config.http_host,
            port=config.http_port,
            log_level=config.log_level,
        )
        await channel.serve()
        return True

    return False


def main(argv: Sequence[str] | None = None) -> int:
    config = get_server_config(argv)
    configure_logging(config.log_level)
    log_config_sources(config)

    try:
        if not asyncio.run(serve(config)):
            print(_MODES_HELP, file=sys.stderr)
    except KeyboardInterrupt:
        return 0
    except Exception:
        log_exception(__name__, "Error starting server")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
