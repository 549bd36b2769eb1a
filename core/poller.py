"""
Bounded polling for external state that changes eventually.

Usage:
    output = await poll_until(check, lambda out: "ready" in out, label="service")
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

from pydantic import BaseModel, ConfigDict, Field

from core.errors import PollTimeoutError
from core.logging_core import log_debug

DEFAULT_MAX_ATTEMPTS = 30
DEFAULT_INTERVAL = 2.0

Sleep = Callable[[float], Awaitable[None]]


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


class PollState(BaseModel):
    """Progress of one polling loop."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    attempt: int = 0
    max_attempts: int = Field(default=DEFAULT_MAX_ATTEMPTS, ge=1)
    interval: float = Field(default=DEFAULT_INTERVAL, ge=0)
    predicate: Callable[[str], bool]

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts


async def poll_until(
    check: Callable[[], Awaitable[str]],
    predicate: Callable[[str], bool],
    *,
    label: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    interval: float = DEFAULT_INTERVAL,
    sleep: Sleep | None = None,
) -> str:
    """Call *check* until *predicate* accepts its output.

    A failing ``check()`` counts as "not yet" and never ends the loop early.
    Returns the accepted output.

    Raises:
        PollTimeoutError: when ``max_attempts`` checks all came back negative.
    """
    sleep = sleep or _sleep
    state = PollState(max_attempts=max_attempts, interval=interval, predicate=predicate)

    while not state.exhausted:
        state.attempt += 1
        try:
            output = await check()
        except Exception as exc:
            log_debug(__name__, "%s: check %d/%d failed: %s", label, state.attempt, state.max_attempts, exc)
        else:
            if state.predicate(output):
                log_debug(__name__, "%s: condition met on attempt %d", label, state.attempt)
                return output
        await sleep(state.interval)

    raise PollTimeoutError(label, attempts=state.attempt)
