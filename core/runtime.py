"""RuntimeObject - lifecycle base for long-lived services (channels)."""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field, PrivateAttr


class RuntimeObject(BaseModel):
    """Start/stop flag plus a teardown hook. ``shutdown()`` runs the hook once per start."""

    model_config = {"arbitrary_types_allowed": True}

    name: str = Field(default="runtime_object")

    _running: bool = PrivateAttr(default=False)
    _lifecycle_lock: asyncio.Lock = PrivateAttr(default_factory=asyncio.Lock)

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        async with self._lifecycle_lock:
            self._running = True

    async def shutdown(self) -> None:
        async with self._lifecycle_lock:
            if not self._running:
                return
            self._shutdown_impl()
            self._running = False

    def _shutdown_impl(self) -> None:
        """Release resources held while running."""
