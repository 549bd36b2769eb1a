from pathlib import Path

import pytest
from fastmcp import Client

from app.server import build_mcp_server, tool_boundary, to_tool_result
from conftest import SIMCTL_BOOTED, FakeRunner
from core.errors import NoDeviceFoundError
from core.responses import ToolResponse

TOOL_NAMES = {
    "flutter_build_ios",
    "get_flutter_devices",
    "start_simulator",
    "install_flutter_app",
    "launch_flutter_app",
    "take_simulator_screenshot",
    "flutter_design_check_workflow",
}


@pytest.mark.asyncio
async def test_all_tools_and_prompt_are_registered() -> None:
    async with Client(build_mcp_server()) as client:
        tools = await client.list_tools()
        prompts = await client.list_prompts()

    assert {tool.name for tool in tools} == TOOL_NAMES
    assert [prompt.name for prompt in prompts] == ["ensure_screen_matches_design"]

    start = next(tool for tool in tools if tool.name == "start_simulator")
    assert start.inputSchema["required"] == ["device_id"]


@pytest.mark.asyncio
async def test_tool_call_returns_text_content(runner: FakeRunner) -> None:
    runner.on("xcrun simctl list", SIMCTL_BOOTED)

    async with Client(build_mcp_server()) as client:
        result = await client.call_tool("start_simulator", {"device_id": "ABCD-1"})

    assert not result.is_error
    assert result.content[0].text == "Simulator ABCD-1 is already running"


@pytest.mark.asyncio
async def test_tool_failure_becomes_error_result(runner: FakeRunner) -> None:
    runner.fail("flutter build ios", stderr="Xcode build failed")

    async with Client(build_mcp_server()) as client:
        result = await client.call_tool("flutter_build_ios", {"project_path": "."}, raise_on_error=False)

    assert result.is_error
    assert "Error: Command failed: flutter build ios --simulator" in result.content[0].text
    assert "Xcode build failed" in result.content[0].text


@pytest.mark.asyncio
async def test_workflow_tool_returns_narrative_and_image(ready_project: Path) -> None:
    async with Client(build_mcp_server()) as client:
        result = await client.call_tool(
            "flutter_design_check_workflow",
            {"device_id": "ABCD-1", "project_path": str(ready_project), "screenshot_filename": "out.png"},
        )

    text, image = result.content
    assert text.text.endswith("✓ Screenshot captured")
    assert image.type == "image"
    assert image.mimeType == "image/png"


@pytest.mark.asyncio
async def test_prompt_embeds_design_reference() -> None:
    async with Client(build_mcp_server()) as client:
        result = await client.get_prompt(
            "ensure_screen_matches_design", {"design_reference": "https://figma.com/file/abc"}
        )

    text = result.messages[0].content.text
    assert "- https://figma.com/file/abc" in text
    assert "take_simulator_screenshot" in text
    assert result.messages[0].role == "user"


@pytest.mark.asyncio
async def test_tool_boundary_catches_everything() -> None:
    async def boom() -> ToolResponse:
        raise NoDeviceFoundError()

    response = await tool_boundary("demo", boom())

    assert response.is_error
    assert response.text_content == "Error: No iOS simulator found"


def test_to_tool_result_converts_blocks() -> None:
    result = to_tool_result(ToolResponse.text("hello"))
    assert result.content[0].text == "hello"
