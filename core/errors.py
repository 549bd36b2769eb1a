"""Error taxonomy shared by the executor, workflows and channels.

Every error carries a stable ``error_code``, a human-readable
``error_message`` and the HTTP ``status_code`` used when it reaches the
HTTP channel.  Tool handlers reframe them as failure responses.
"""

from __future__ import annotations

from typing import Any


class ToolError(Exception):
    """Structured error used across the server layers."""

    error_code: str = "tool_error"
    status_code: int = 500

    def __init__(
        self,
        error_message: str,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(error_message)
        self.error_message = error_message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = int(status_code)
        self.meta = dict(meta or {})

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error_code": self.error_code,
            "error_message": self.error_message,
        }
        if self.meta:
            payload["meta"] = self.meta
        return payload


class ExecutionError(ToolError):
    """An external command exited non-zero or could not be spawned."""

    error_code = "execution_failed"
    status_code = 502

    def __init__(
        self,
        *,
        command: str,
        exit_code: int | None,
        stderr: str = "",
        stdout: str = "",
    ) -> None:
        detail = stderr.strip() or stdout.strip() or f"exit code {exit_code}"
        super().__init__(
            f"Command failed: {command}\n{detail}",
            meta={"command": command, "exit_code": exit_code},
        )
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        self.stdout = stdout


class PollTimeoutError(ToolError, TimeoutError):
    """A bounded poll ran out of attempts."""

    error_code = "poll_timeout"
    status_code = 504

    def __init__(self, label: str, *, attempts: int) -> None:
        super().__init__(
            f"{label} failed to start within timeout period",
            meta={"label": label, "attempts": attempts},
        )
        self.label = label
        self.attempts = attempts


class NoDeviceFoundError(ToolError):
    error_code = "no_device_found"
    status_code = 404

    def __init__(self, error_message: str = "No iOS simulator found") -> None:
        super().__init__(error_message)


class PreconditionError(ToolError):
    error_code = "precondition_failed"
    status_code = 412


class TransportConflictError(ToolError):
    error_code = "transport_conflict"
    status_code = 409

    def __init__(self, error_message: str = "MCP server already has an active SSE session") -> None:
        super().__init__(error_message)


class RoutingError(ToolError):
    """A message was posted for a missing or unknown session."""

    error_code = "routing_error"
    status_code = 400
