#!/usr/bin/env python3
"""Turn raw xcodebuild results into tool responses"""

import re
from typing import List, Optional

from xcodebuild_mcp_server.models import (
    BuildParameters,
    ExecutionResult,
    TargetDescriptor,
    ToolResponse,
    XcodePlatform,
)
from xcodebuild_mcp_server.utils.log import log

WARNING_PATTERN = re.compile(r"warning:", re.IGNORECASE)
ERROR_PATTERN = re.compile(r"error:", re.IGNORECASE)


def extract_build_messages(output: str, error: Optional[str] = None) -> List[str]:
    """
    Pull warning and error lines out of a build log, in the order they appear.

    Warnings are taken from both stdout and stderr. Error lines are only taken
    from stdout; stderr is reported separately, line by line, on failure.

    Args:
        output: Captured standard output
        error: Captured standard error, if any

    Returns:
        Formatted message blocks ("⚠️ Warning: ..." / "❌ Error: ...")
    """
    messages = []

    for line in (output or "").split("\n"):
        if WARNING_PATTERN.search(line):
            messages.append(f"⚠️ Warning: {line}")
        elif ERROR_PATTERN.search(line):
            messages.append(f"❌ Error: {line}")

    for line in (error or "").split("\n"):
        if WARNING_PATTERN.search(line):
            messages.append(f"⚠️ Warning: {line}")

    return messages


def _call(tool: str, **arguments) -> str:
    args = ", ".join(f"{name}='{value}'" for name, value in arguments.items())
    return f"{tool}({args})"


def next_steps(params: BuildParameters, target: TargetDescriptor, action: str) -> Optional[str]:
    """Follow-up suggestions shown after a successful build"""
    if action != "build":
        return None

    container = {f"{params.container_kind}_path": params.container_path, "scheme": params.scheme}

    if target.platform is XcodePlatform.MACOS:
        return (
            "Next Steps:\n"
            f"1. Build and launch the app: {_call('build_run_macos', **container)}\n"
            f"2. Run the tests: {_call('test_macos', **container)}"
        )

    if target.platform.is_simulator:
        if target.simulator_id:
            selector = {"simulator_id": target.simulator_id}
        else:
            selector = {"simulator_name": target.simulator_name}
        return (
            "Next Steps:\n"
            f"1. Build, install and launch on the simulator: {_call('build_run_sim', **container, **selector)}\n"
            f"2. Run the tests: {_call('test_sim', **container, **selector)}\n"
            "3. List available simulators: list_sims()"
        )

    device = {"device_id": target.device_id or "DEVICE_UDID"}
    return (
        "Next Steps:\n"
        f"1. Run the tests on a device: {_call('test_device', **container, **device)}\n"
        "2. Install and launch the app with your device tooling (provisioning is not managed here)"
    )


def interpret_build_result(result: ExecutionResult,
                           params: BuildParameters,
                           target: TargetDescriptor,
                           action: str,
                           label: str) -> ToolResponse:
    """
    Classify an xcodebuild result.

    Args:
        result: What the executor returned
        params: The build parameters the command was built from
        target: The build target
        action: xcodebuild action ("build", "test")
        label: Operation label, e.g. "iOS Simulator Build"

    Returns:
        ToolResponse with warnings first, then stderr lines and the failure
        summary (is_error=True), or the success summary and next steps
    """
    lines = extract_build_messages(result.output, result.error)

    if not result.success:
        log("error", f"{label} {action} failed: {result.error}")
        for line in (result.error or "").split("\n"):
            if line.strip():
                lines.append(f"❌ [stderr] {line}")
        lines.append(f"❌ {label} {action} failed for scheme {params.scheme}.")
        return ToolResponse.from_lines(lines, is_error=True)

    log("info", f"✅ {label} {action} succeeded.")
    lines.append(f"✅ {label} {action} succeeded for scheme {params.scheme}.")

    steps = next_steps(params, target, action)
    if steps:
        lines.append(steps)

    return ToolResponse.from_lines(lines)
