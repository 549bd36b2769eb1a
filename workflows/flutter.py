"""
Flutter CLI tools - build and device discovery.

The device listing is free text produced by ``flutter devices``; parsing it
lives in ``find_ios_simulator`` so it can be tested without a toolchain.
"""

from __future__ import annotations

import re
from pathlib import Path

from core import executor
from core.responses import ToolResponse

# Expected row shape: "... iOS Simulator ... (mobile) • <device id> • ..."
# Matching is per line; the id is the first bullet-separated column after "(mobile)".
IOS_SIMULATOR_PATTERN = re.compile(r"iOS Simulator.*?\(mobile\).*?• ([a-zA-Z0-9-]+)")


def find_ios_simulator(listing: str) -> str | None:
    """Return the first iOS simulator id in a ``flutter devices`` listing."""
    match = IOS_SIMULATOR_PATTERN.search(listing)
    return match.group(1) if match else None


async def build_flutter_ios(project_path: str | Path = ".") -> ToolResponse:
    # --simulator: the install/launch steps read build/ios/iphonesimulator.
    result = await executor.run_command(["flutter", "build", "ios", "--simulator"], cwd=project_path)
    return ToolResponse.text(f"Flutter iOS build completed:\n{result.combined()}")


async def get_flutter_devices() -> ToolResponse:
    result = await executor.run_command(["flutter", "devices"])
    return ToolResponse.text(f"Available Flutter devices:\n{result.stdout}")
