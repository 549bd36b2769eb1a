"""
Design-check workflow - build, boot, install, launch and screenshot in one call.

Stages run strictly in order.  The first failure stops the run; nothing is
rolled back.  The failure report names the stage that was in progress and
the log lines completed before it.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from core.errors import NoDeviceFoundError
from core.logging_core import log_info, log_warning
from core.responses import TextBlock, ToolResponse
from workflows import flutter, simulator


class StepLog(BaseModel):
    """Append-only narrative of one workflow run."""

    lines: list[str] = Field(default_factory=list)
    in_progress: str | None = None

    def start(self, line: str) -> None:
        self.lines.append(line)
        self.in_progress = line

    def done(self, line: str) -> None:
        self.lines.append(line)
        self.in_progress = None

    @property
    def last(self) -> str | None:
        return self.lines[-1] if self.lines else None

    def completed(self) -> list[str]:
        """Lines logged before the stage in progress (all lines when idle)."""
        if self.in_progress is None:
            return list(self.lines)
        return self.lines[:-1]

    def summary(self) -> str:
        return "\n".join(self.lines)


def _failure_report(log: StepLog, error: Exception) -> str:
    completed = "\n".join(log.completed())
    return f"Workflow failed at step: {log.in_progress}\nError: {error}\nCompleted steps:\n{completed}"


async def run_design_check_workflow(
    device_id: str | None = None,
    project_path: str | Path = ".",
    screenshot_filename: str | None = None,
) -> ToolResponse:
    log = StepLog()

    try:
        log.start("Building Flutter iOS app...")
        await flutter.build_flutter_ios(project_path)
        log.done("✓ iOS app built successfully")

        if not device_id:
            log.start("Resolving iOS simulator...")
            devices = await flutter.get_flutter_devices()
            device_id = flutter.find_ios_simulator(devices.text_content)
            if device_id is None:
                raise NoDeviceFoundError()
            log.done(f"✓ Using iOS simulator: {device_id}")

        log.start("Starting simulator...")
        await simulator.start_simulator(device_id)
        log.done("✓ Simulator started")

        log.start("Reading app bundle identifier...")
        bundle_id = await simulator.read_bundle_id(project_path)
        log.done(f"✓ Bundle identifier: {bundle_id}")

        log.start(f"Checking installed app container for bundle: {bundle_id}...")
        if await simulator.is_app_installed_on_booted_simulator(bundle_id):
            log.done("✓ App already installed on booted simulator (get_app_container succeeded)")
        else:
            log.start("Installing Flutter app...")
            await simulator.install_flutter_app(device_id, project_path)
            log.done("✓ App installed")

        log.start("Launching Flutter app...")
        await simulator.launch_flutter_app(device_id, project_path)
        log.done("✓ App launched")

        log.start("Taking screenshot...")
        screenshot = await simulator.take_simulator_screenshot(screenshot_filename, project_path)
        log.done("✓ Screenshot captured")

    except Exception as exc:
        log_warning(__name__, "design check failed at %r: %s", log.in_progress, exc)
        return ToolResponse.failure(_failure_report(log, exc))

    log_info(__name__, "design check completed on %s", device_id)
    return ToolResponse(
        content=[
            TextBlock(text=f"Flutter Design Check Workflow completed:\n{log.summary()}"),
            *screenshot.images,
        ]
    )
