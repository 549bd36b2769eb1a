from pathlib import Path

import pytest

from conftest import FLUTTER_DEVICES, FakeRunner, Reply
from core.errors import ExecutionError
from workflows.flutter import build_flutter_ios, find_ios_simulator, get_flutter_devices


def test_find_ios_simulator_extracts_first_simulator_id() -> None:
    assert find_ios_simulator(FLUTTER_DEVICES) == "SIM-1234-ABCD"


def test_find_ios_simulator_picks_the_first_of_several() -> None:
    listing = (
        "iOS Simulator iPhone 15 (mobile) • FIRST-1 • ios • iOS-17-2 (simulator)\n"
        "iOS Simulator iPhone SE (mobile) • SECOND-2 • ios • iOS-17-2 (simulator)\n"
    )
    assert find_ios_simulator(listing) == "FIRST-1"


@pytest.mark.parametrize(
    "listing",
    [
        "",
        "No devices detected.",
        "macOS (desktop) • macos • darwin-arm64 • macOS 14.2",
        "Chrome (web) • chrome • web-javascript • Google Chrome 120",
        # "(mobile)" and the id must be on the same line as "iOS Simulator".
        "iOS Simulator iPhone 15\n(mobile) • SPLIT-1 • ios",
    ],
)
def test_find_ios_simulator_returns_none_without_a_match(listing: str) -> None:
    assert find_ios_simulator(listing) is None


@pytest.mark.asyncio
async def test_build_reports_output_and_warnings(runner: FakeRunner, tmp_path: Path) -> None:
    runner.on("flutter build ios", Reply(stdout="Built Runner.app\n", stderr="Warning: deprecated API"))

    response = await build_flutter_ios(tmp_path)

    assert not response.is_error
    assert response.text_content == (
        "Flutter iOS build completed:\nBuilt Runner.app\n\nErrors/Warnings: Warning: deprecated API"
    )
    assert runner.calls == ["flutter build ios --simulator"]
    assert runner.cwds == [str(tmp_path)]


@pytest.mark.asyncio
async def test_build_failure_propagates(runner: FakeRunner) -> None:
    runner.fail("flutter build ios", stderr="Xcode build failed", exit_code=1)

    with pytest.raises(ExecutionError, match="Xcode build failed"):
        await build_flutter_ios(".")


@pytest.mark.asyncio
async def test_get_flutter_devices_returns_raw_listing(runner: FakeRunner) -> None:
    runner.on("flutter devices", FLUTTER_DEVICES)

    response = await get_flutter_devices()

    assert response.text_content == f"Available Flutter devices:\n{FLUTTER_DEVICES}"
