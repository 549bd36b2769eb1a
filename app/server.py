"""
MCP server assembly.

Single public API:
    ``build_mcp_server()`` → ``FastMCP`` with every tool and prompt registered.

Each tool handler is a terminal error boundary: whatever the workflow
raises is logged and returned as an ``isError`` result, never as a
transport fault.
"""

from __future__ import annotations

from typing import Annotated, Awaitable

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError as MCPToolError
from fastmcp.tools.tool import ToolResult
from pydantic import Field

from core.logging_core import log_error, log_info
from core.responses import ToolResponse
from workflows import design_check, flutter, prompts, simulator

SERVER_NAME = "flutter-check-design"

ProjectPath = Annotated[str, Field(description="Path to Flutter project (defaults to current directory)")]
DeviceId = Annotated[str, Field(description="Device ID of the simulator")]


async def tool_boundary(tool_name: str, call: Awaitable[ToolResponse]) -> ToolResponse:
    """Await *call*, turning any exception into a failure response."""
    try:
        return await call
    except Exception as exc:
        log_error(__name__, "tool %s failed: %s", tool_name, exc)
        return ToolResponse.failure(f"Error: {exc}")


def to_tool_result(response: ToolResponse) -> ToolResult:
    if response.is_error:
        raise MCPToolError(response.text_content)
    return ToolResult(content=response.to_mcp_content())


def build_mcp_server() -> FastMCP:
    mcp = FastMCP(
        name=SERVER_NAME,
        instructions="Build, run and screenshot Flutter iOS apps on the simulator to check them against a design.",
    )

    @mcp.tool(name="flutter_build_ios", description="Build Flutter iOS app for simulator")
    async def flutter_build_ios(project_path: ProjectPath = ".") -> ToolResult:
        return to_tool_result(await tool_boundary("flutter_build_ios", flutter.build_flutter_ios(project_path)))

    @mcp.tool(
        name="get_flutter_devices",
        description="Get list of available Flutter devices (simulators and physical devices)",
    )
    async def get_flutter_devices() -> ToolResult:
        return to_tool_result(await tool_boundary("get_flutter_devices", flutter.get_flutter_devices()))

    @mcp.tool(name="start_simulator", description="Start iOS simulator if not already running")
    async def start_simulator(device_id: DeviceId) -> ToolResult:
        return to_tool_result(await tool_boundary("start_simulator", simulator.start_simulator(device_id)))

    @mcp.tool(name="install_flutter_app", description="Install Flutter app on specified device")
    async def install_flutter_app(device_id: DeviceId, project_path: ProjectPath = ".") -> ToolResult:
        return to_tool_result(
            await tool_boundary("install_flutter_app", simulator.install_flutter_app(device_id, project_path))
        )

    @mcp.tool(name="launch_flutter_app", description="Launch the Flutter app on simulator using bundle ID")
    async def launch_flutter_app(device_id: DeviceId, project_path: ProjectPath = ".") -> ToolResult:
        return to_tool_result(
            await tool_boundary("launch_flutter_app", simulator.launch_flutter_app(device_id, project_path))
        )

    @mcp.tool(
        name="take_simulator_screenshot",
        description="Take screenshot of iOS simulator, for use in the design feedback loop",
    )
    async def take_simulator_screenshot(
        filename: Annotated[
            str | None, Field(description="Screenshot filename (defaults to screenshot_[timestamp].png)")
        ] = None,
        output_path: Annotated[
            str, Field(description="Directory to save screenshot (defaults to current directory)")
        ] = ".",
    ) -> ToolResult:
        return to_tool_result(
            await tool_boundary(
                "take_simulator_screenshot",
                simulator.take_simulator_screenshot(filename, output_path),
            )
        )

    @mcp.tool(
        name="flutter_design_check_workflow",
        description="Complete workflow: build, install, launch Flutter app and take screenshot",
    )
    async def flutter_design_check_workflow(
        device_id: Annotated[
            str | None,
            Field(description="Device ID of the simulator (if not provided, will use first available iOS simulator)"),
        ] = None,
        project_path: ProjectPath = ".",
        screenshot_filename: Annotated[
            str | None, Field(description="Screenshot filename (defaults to screenshot_[timestamp].png)")
        ] = None,
    ) -> ToolResult:
        return to_tool_result(
            await tool_boundary(
                "flutter_design_check_workflow",
                design_check.run_design_check_workflow(device_id, project_path, screenshot_filename),
            )
        )

    @mcp.prompt(
        name="ensure_screen_matches_design",
        description=(
            "Instructs the LLM to iteratively build, run, screenshot, and refine the Flutter UI "
            "until it matches the provided design at 100%."
        ),
    )
    def ensure_screen_matches_design(
        design_reference: Annotated[str, Field(description="Design reference: Figma URL, image path, or description")],
    ) -> str:
        return prompts.design_match_script(design_reference)

    log_info(__name__, "MCP server %s assembled", SERVER_NAME)
    return mcp
