"""Prompt text for the iterative build → screenshot → compare loop."""

from __future__ import annotations

_SCRIPT = """\
You are implementing a Flutter screen that must match the target design at 100% visual fidelity.
Design reference:
- {design_reference}

Follow this iterative workflow strictly:
1) Implement or update the Flutter UI code.
2) Build the iOS app (only when code has changed or first run) using tool: flutter_build_ios {{ project_path }}.
3) Start or reuse the simulator using tool: start_simulator {{ device_id }}.
4) Install the app if needed using tool: install_flutter_app {{ device_id, project_path }}.
5) Launch the app using tool: launch_flutter_app {{ device_id, project_path }}.
6) Capture a screenshot using tool: take_simulator_screenshot {{ filename, output_path }}.
7) Compare the screenshot against the design reference with a strict eye for pixel alignment, spacing, typography, colors, shadows, and radii.
8) If anything does not match exactly, refine the code and repeat from step 2 until the match is 100%.

Constraints and best practices:
- Minimize rebuilds: only call flutter_build_ios when code changed or first run.
- Use small, focused edits per iteration.
- Ensure consistent fonts, weights, letter spacing, and line heights.
- Validate layout across safe areas and typical device sizes.
- Re-check visual differences after each iteration until no differences remain.

Acceptance criteria (must all be satisfied):
- Pixel-perfect match to the design (layout, sizes, spacing).
- Typography (fonts, sizes, weights, letter spacing, line heights) exactly matches.
- Colors, shadows, radii, and iconography match.
- The final screenshot is indistinguishable from the design (100% match).

Available tools in this server:
- flutter_build_ios(project_path)
- get_flutter_devices()
- start_simulator(device_id)
- install_flutter_app(device_id, project_path)
- launch_flutter_app(device_id, project_path)
- take_simulator_screenshot(filename, output_path)
- flutter_design_check_workflow(device_id?, project_path, screenshot_filename)

Always output the exact tool calls you will make with arguments, then execute them in order."""


def design_match_script(design_reference: str | None) -> str:
    reference = (design_reference or "").strip() or "(not provided)"
    return _SCRIPT.format(design_reference=reference)
