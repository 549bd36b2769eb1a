"""Flutter / iOS simulator workflows exposed as MCP tools."""

from .design_check import StepLog, run_design_check_workflow
from .flutter import build_flutter_ios, find_ios_simulator, get_flutter_devices
from .prompts import design_match_script
from .simulator import (
    install_flutter_app,
    is_app_installed_on_booted_simulator,
    launch_flutter_app,
    start_simulator,
    take_simulator_screenshot,
)

__all__ = [
    "StepLog",
    "run_design_check_workflow",
    "build_flutter_ios",
    "find_ios_simulator",
    "get_flutter_devices",
    "design_match_script",
    "install_flutter_app",
    "is_app_installed_on_booted_simulator",
    "launch_flutter_app",
    "start_simulator",
    "take_simulator_screenshot",
]
