"""
iOS simulator tools - boot, install, launch, screenshot and the
installed-app probe.

All simulator interaction goes through ``xcrun simctl``; the app's bundle
id is read from the simulator build's ``Info.plist`` with PlistBuddy.
"""

from __future__ import annotations

import asyncio
import os
import time
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

from core import executor
from core.errors import ExecutionError, PreconditionError
from core.logging_core import log_debug, log_info, log_warning
from core.poller import Sleep, poll_until
from core.responses import ImageBlock, TextBlock, ToolResponse

PLIST_BUDDY = "/usr/libexec/PlistBuddy"
INFO_PLIST = Path("build/ios/iphonesimulator/Runner.app/Info.plist")
BOOTED_MARKER = "Booted"


# ── boot ─────────────────────────────────────────────────────────────────────


def is_booted(listing: str, device_id: str) -> bool:
    """True when a ``simctl list`` row for *device_id* reports it booted."""
    return any(device_id in line and BOOTED_MARKER in line for line in listing.splitlines())


async def _list_simulators() -> str:
    result = await executor.run_command(["xcrun", "simctl", "list"])
    return result.stdout


async def _best_effort(command: list[str]) -> None:
    try:
        await executor.run_command(command)
    except ExecutionError as exc:
        log_warning(__name__, "ignored failure of %s: %s", " ".join(command), exc.error_message)


async def wait_for_simulator_boot(device_id: str, *, sleep: Sleep | None = None) -> None:
    """Ask the simulator to boot, then wait until ``simctl`` reports it booted.

    The boot request is fire-and-forget: an already booted device makes
    ``simctl boot`` fail, and the poll below decides the outcome.

    Raises:
        PollTimeoutError: if the device is not booted after the poll budget.
    """
    await _best_effort(["open", "-a", "Simulator"])
    await _best_effort(["xcrun", "simctl", "boot", device_id])
    await poll_until(
        _list_simulators,
        lambda listing: is_booted(listing, device_id),
        label=f"Simulator {device_id}",
        sleep=sleep,
    )


async def start_simulator(device_id: str) -> ToolResponse:
    try:
        if is_booted(await _list_simulators(), device_id):
            return ToolResponse.text(f"Simulator {device_id} is already running")
    except ExecutionError as exc:
        log_debug(__name__, "simulator pre-check failed: %s", exc.error_message)

    await wait_for_simulator_boot(device_id)
    log_info(__name__, "Simulator %s booted", device_id)
    return ToolResponse.text(f"Simulator {device_id} started successfully")


# ── app metadata & probe ─────────────────────────────────────────────────────


async def read_bundle_id(project_path: str | Path) -> str:
    plist = Path(project_path) / INFO_PLIST
    result = await executor.run_command([PLIST_BUDDY, "-c", "Print :CFBundleIdentifier", str(plist)])
    return result.stdout.strip()


class ProbeError(BaseModel):
    kind: Literal["query_failed", "empty_output"]
    detail: str = ""
    exit_code: int | None = None


class ProbeResult(BaseModel):
    bundle_id: str
    container_path: str | None = None
    error: ProbeError | None = None

    @property
    def installed(self) -> bool:
        return self.error is None and bool(self.container_path)


async def probe_app_container(bundle_id: str) -> ProbeResult:
    """Query the booted simulator for *bundle_id*'s app container."""
    try:
        result = await executor.run_command(["xcrun", "simctl", "get_app_container", "booted", bundle_id])
    except ExecutionError as exc:
        return ProbeResult(
            bundle_id=bundle_id,
            error=ProbeError(kind="query_failed", detail=exc.stderr.strip(), exit_code=exc.exit_code),
        )

    container = result.stdout.strip()
    if not container:
        return ProbeResult(bundle_id=bundle_id, error=ProbeError(kind="empty_output"))
    return ProbeResult(bundle_id=bundle_id, container_path=container)


async def is_app_installed_on_booted_simulator(bundle_id: str) -> bool:
    """Whether *bundle_id* is installed on the booted simulator. Never raises."""
    try:
        probe = await probe_app_container(bundle_id)
    except Exception as exc:
        log_warning(__name__, "app probe for %s crashed: %s", bundle_id, exc)
        return False

    if probe.error is not None:
        log_debug(
            __name__,
            "app %s not found on booted simulator (%s)",
            bundle_id,
            probe.error.kind,
            meta=probe.error.model_dump(exclude_defaults=True),
        )
    return probe.installed


# ── install / launch / screenshot ────────────────────────────────────────────


async def install_flutter_app(device_id: str, project_path: str | Path = ".") -> ToolResponse:
    result = await executor.run_command(["flutter", "install", "-d", device_id], cwd=project_path)
    return ToolResponse.text(f"Flutter app installed on {device_id}:\n{result.combined()}")


def _launch_settle_seconds() -> float:
    return float(os.getenv("LAUNCH_SETTLE_SECONDS", "3"))


async def launch_flutter_app(device_id: str, project_path: str | Path = ".") -> ToolResponse:
    bundle_id = await read_bundle_id(project_path)

    if not await is_app_installed_on_booted_simulator(bundle_id):
        raise PreconditionError(
            f"App with bundle ID {bundle_id} is not installed on the booted simulator. "
            "Please install before launching."
        )

    await executor.run_command(["xcrun", "simctl", "launch", device_id, bundle_id])

    # Give the app a moment to draw its first frame.
    await asyncio.sleep(_launch_settle_seconds())

    return ToolResponse.text(f"Flutter app launched on {device_id} with bundle ID: {bundle_id}")


def default_screenshot_name() -> str:
    return f"screenshot_{int(time.time() * 1000)}.png"


async def take_simulator_screenshot(filename: str | None = None, output_path: str | Path = ".") -> ToolResponse:
    full_path = Path(output_path) / (filename or default_screenshot_name())
    await executor.run_command(["xcrun", "simctl", "io", "booted", "screenshot", str(full_path)])

    return ToolResponse(
        content=[
            TextBlock(text=f"Screenshot saved to: {full_path}"),
            ImageBlock.from_bytes(full_path.read_bytes(), mime_type="image/png"),
        ]
    )
