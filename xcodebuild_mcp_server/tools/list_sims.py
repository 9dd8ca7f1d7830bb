#!/usr/bin/env python3
"""list_sims tool - List available simulators"""

from collections import OrderedDict
from typing import List

from mcp.server.fastmcp import Context

from xcodebuild_mcp_server.models import ToolResponse
from xcodebuild_mcp_server.server import mcp, run_operation
from xcodebuild_mcp_server.utils.dispatch import Operation
from xcodebuild_mcp_server.utils.simulator import SimulatorDevice, list_available_simulators

RUNTIME_PREFIX = "com.apple.CoreSimulator.SimRuntime."


def runtime_display_name(runtime: str) -> str:
    """com.apple.CoreSimulator.SimRuntime.iOS-18-2 -> iOS 18.2"""
    if not runtime.startswith(RUNTIME_PREFIX):
        return runtime
    name, _, version = runtime[len(RUNTIME_PREFIX):].partition("-")
    if not version:
        return name
    return f"{name} {version.replace('-', '.')}"


def format_simulator_list(devices: List[SimulatorDevice]) -> str:
    if not devices:
        return "No available simulators found."

    by_runtime = OrderedDict()
    for device in devices:
        by_runtime.setdefault(device.runtime, []).append(device)

    lines = ["Available Simulators:"]
    for runtime, runtime_devices in by_runtime.items():
        lines.append("")
        lines.append(f"{runtime_display_name(runtime)}:")
        for device in runtime_devices:
            marker = " [Booted]" if device.is_booted else ""
            lines.append(f"- {device.name} ({device.udid}){marker}")

    lines.append("")
    lines.append("Next Steps:")
    lines.append("1. Boot a simulator and build for it: build_run_sim(..., simulator_id='UUID_FROM_ABOVE')")
    lines.append("2. Or select one by name: build_sim(..., simulator_name='NAME_FROM_ABOVE')")
    return "\n".join(lines)


async def list_sims_logic(params, executor) -> ToolResponse:
    devices = await list_available_simulators(executor)
    return ToolResponse.text(format_simulator_list(devices))


LIST_SIMS = Operation(
    name="list_sims",
    label="simulator",
    action="listing",
    body=list_sims_logic,
    fields={},
)


@mcp.tool()
async def list_sims(ctx: Context):
    """
    List available simulators grouped by runtime. Booted simulators are marked.

    Returns:
        One line per simulator with its name and UUID
    """
    return await run_operation(ctx, LIST_SIMS, {})
