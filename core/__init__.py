"""Core package - process execution, polling, responses, errors, config."""

from .errors import (
    ExecutionError,
    NoDeviceFoundError,
    PollTimeoutError,
    PreconditionError,
    RoutingError,
    ToolError,
    TransportConflictError,
)
from .executor import ExecutionResult, run_command
from .poller import PollState, poll_until
from .responses import ImageBlock, TextBlock, ToolResponse

__all__ = [
    "ExecutionError",
    "NoDeviceFoundError",
    "PollTimeoutError",
    "PreconditionError",
    "RoutingError",
    "ToolError",
    "TransportConflictError",
    "ExecutionResult",
    "run_command",
    "PollState",
    "poll_until",
    "ImageBlock",
    "TextBlock",
    "ToolResponse",
]
