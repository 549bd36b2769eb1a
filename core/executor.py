"""
Command executor - the single place where external processes are spawned.

Public API:
    ``run_command(command, cwd=None)`` → ``ExecutionResult``

Workflows call it through the module (``executor.run_command``) so a test
can swap in a scripted runner with one ``monkeypatch``.
"""

from __future__ import annotations

import asyncio
import shlex
from pathlib import Path
from typing import Sequence

from pydantic import BaseModel

from core.errors import ExecutionError
from core.logging_core import log_debug

_COMMAND_NOT_FOUND = 127


class ExecutionResult(BaseModel):
    """Captured output of one finished command."""

    stdout: str = ""
    stderr: str = ""

    def combined(self) -> str:
        """stdout, followed by stderr as a warnings section when present."""
        if self.stderr:
            return f"{self.stdout}\nErrors/Warnings: {self.stderr}"
        return self.stdout


def to_argv(command: str | Sequence[str]) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return [str(part) for part in command]


def _decode(data: bytes | None) -> str:
    return (data or b"").decode("utf-8", errors="replace")


async def run_command(
    command: str | Sequence[str],
    *,
    cwd: str | Path | None = None,
) -> ExecutionResult:
    """Run *command* to completion and capture both output streams.

    A non-empty stderr is not a failure; only the exit status is.

    Raises:
        ExecutionError: on non-zero exit, or when the process cannot be spawned.
    """
    argv = to_argv(command)
    display = shlex.join(argv)
    log_debug(__name__, "exec: %s (cwd=%s)", display, cwd or ".")

    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=str(cwd) if cwd is not None else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise ExecutionError(command=display, exit_code=_COMMAND_NOT_FOUND, stderr=str(exc)) from exc
    except OSError as exc:
        raise ExecutionError(command=display, exit_code=None, stderr=str(exc)) from exc

    raw_out, raw_err = await process.communicate()
    stdout, stderr = _decode(raw_out), _decode(raw_err)

    if process.returncode != 0:
        log_debug(__name__, "exec failed (%s): %s", process.returncode, display)
        raise ExecutionError(command=display, exit_code=process.returncode, stderr=stderr, stdout=stdout)

    return ExecutionResult(stdout=stdout, stderr=stderr)
