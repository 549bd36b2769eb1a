"""
Channels package - transports that carry MCP traffic to the server.

Architecture:
    BaseChannel      - lifecycle + ``serve()`` contract
    ├─ StdioChannel  - MCP over stdin/stdout
    └─ SseChannel    - MCP over SSE (FastAPI + uvicorn), single session

Usage:
    from channels import SseChannel, StdioChannel
"""

from .base import BaseChannel
from .sse_channel import SessionRegistry, SseChannel
from .stdio_channel import StdioChannel

__all__ = [
    "BaseChannel",
    "SessionRegistry",
    "SseChannel",
    "StdioChannel",
]
