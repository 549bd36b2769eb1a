from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

import pytest

from core import executor, poller
from core.errors import ExecutionError
from core.executor import ExecutionResult, to_argv

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24

SIMCTL_BOOTED = """\
== Devices ==
-- iOS 17.2 --
    iPhone 15 (ABCD-1) (Booted)
    iPhone 15 Pro (EFGH-2) (Shutdown)
"""

SIMCTL_SHUTDOWN = """\
== Devices ==
-- iOS 17.2 --
    iPhone 15 (ABCD-1) (Shutdown)
    iPhone 15 Pro (EFGH-2) (Shutdown)
"""

FLUTTER_DEVICES = """\
2 connected devices:

iOS Simulator iPhone 15 (mobile) • SIM-1234-ABCD • ios • com.apple.CoreSimulator.SimRuntime.iOS-17-2 (simulator)
macOS (desktop)                   • macos         • darwin-arm64 • macOS 14.2 darwin-arm64
"""


@dataclass
class Reply:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    effect: Callable[[list[str]], None] | None = None


class FakeRunner:
    """Scripted stand-in for ``executor.run_command``.

    Rules match on the space-joined argv prefix; the most recently added
    rule wins.  A rule with several replies hands them out in order and
    then keeps repeating the last one.  Unmatched commands fail with 127.
    """

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.cwds: list[str | None] = []
        self._rules: list[tuple[str, list[Reply]]] = []

    def on(self, prefix: str, *replies: Reply | str) -> "FakeRunner":
        scripted = [reply if isinstance(reply, Reply) else Reply(stdout=reply) for reply in replies]
        self._rules.insert(0, (prefix, scripted or [Reply()]))
        return self

    def fail(self, prefix: str, *, stderr: str = "boom", exit_code: int = 1) -> "FakeRunner":
        return self.on(prefix, Reply(stderr=stderr, exit_code=exit_code))

    def count(self, prefix: str) -> int:
        return sum(1 for call in self.calls if call.startswith(prefix))

    def ran(self, prefix: str) -> bool:
        return self.count(prefix) > 0

    async def __call__(self, command, *, cwd=None) -> ExecutionResult:
        argv = to_argv(command)
        line = " ".join(argv)
        self.calls.append(line)
        self.cwds.append(str(cwd) if cwd is not None else None)

        for prefix, replies in self._rules:
            if line.startswith(prefix):
                reply = replies.pop(0) if len(replies) > 1 else replies[0]
                if reply.effect is not None:
                    reply.effect(argv)
                if reply.exit_code != 0:
                    raise ExecutionError(
                        command=line, exit_code=reply.exit_code, stderr=reply.stderr, stdout=reply.stdout
                    )
                return ExecutionResult(stdout=reply.stdout, stderr=reply.stderr)

        raise ExecutionError(command=line, exit_code=127, stderr=f"{argv[0]}: command not found")


class SimClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def write_png(argv: list[str]) -> None:
    Path(argv[-1]).write_bytes(PNG_BYTES)


@pytest.fixture
def runner(monkeypatch: pytest.MonkeyPatch) -> FakeRunner:
    fake = FakeRunner()
    monkeypatch.setattr(executor, "run_command", fake)
    return fake


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> SimClock:
    sim = SimClock()
    monkeypatch.setattr(poller, "_sleep", sim.sleep)
    return sim


@pytest.fixture(autouse=True)
def _no_launch_settle(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LAUNCH_SETTLE_SECONDS", "0")


@pytest.fixture
def ready_project(tmp_path: Path, runner: FakeRunner) -> Path:
    """A project whose build, simulator, install and screenshot all succeed."""
    runner.on("flutter build ios", Reply(stdout="Built build/ios/iphonesimulator/Runner.app\n"))
    runner.on("flutter devices", FLUTTER_DEVICES)
    runner.on("flutter install", "Installing Runner.app...\n")
    runner.on("xcrun simctl list", SIMCTL_BOOTED)
    runner.on("open -a Simulator")
    runner.on("xcrun simctl boot")
    runner.on("/usr/libexec/PlistBuddy", "com.example.app\n")
    runner.on("xcrun simctl get_app_container", "/Users/dev/Library/Developer/CoreSimulator/app\n")
    runner.on("xcrun simctl launch", "com.example.app: 4242\n")
    runner.on("xcrun simctl io booted screenshot", Reply(stdout="Wrote screenshot\n", effect=write_png))
    return tmp_path
