#!/usr/bin/env python3
"""build_run_sim tool - Build, install and launch on a simulator"""

from typing import List, Optional

from mcp.server.fastmcp import Context

from xcodebuild_mcp_server.models import BuildRequest
from xcodebuild_mcp_server.server import mcp, run_operation
from xcodebuild_mcp_server.tools.common import (
    SIMULATOR_DEFAULTS,
    SIMULATOR_FIELDS,
    SIMULATOR_REQUIREMENTS,
    parse_simulator_request,
    simulator_label,
)
from xcodebuild_mcp_server.utils.dispatch import Operation
from xcodebuild_mcp_server.utils.run_pipeline import build_and_run_simulator


async def build_run_sim_logic(request: BuildRequest, executor):
    return await build_and_run_simulator(request, executor, simulator_label(request, "Build"))


BUILD_RUN_SIM = Operation(
    name="build_run_sim",
    label="{platform} Build",
    action="and run",
    body=build_run_sim_logic,
    requirements=SIMULATOR_REQUIREMENTS,
    defaults=SIMULATOR_DEFAULTS,
    parse=parse_simulator_request,
    fields=SIMULATOR_FIELDS,
)


@mcp.tool()
async def build_run_sim(ctx: Context,
                        scheme: Optional[str] = None,
                        project_path: Optional[str] = None,
                        workspace_path: Optional[str] = None,
                        simulator_id: Optional[str] = None,
                        simulator_name: Optional[str] = None,
                        platform: Optional[str] = None,
                        configuration: Optional[str] = None,
                        derived_data_path: Optional[str] = None,
                        extra_args: Optional[List[str]] = None,
                        use_latest_os: Optional[bool] = None):
    """
    Build an app, then boot the simulator if needed, install the app and launch it.

    Args:
        scheme: The scheme to build
        project_path: Path to a .xcodeproj (mutually exclusive with workspace_path)
        workspace_path: Path to a .xcworkspace (mutually exclusive with project_path)
        simulator_id: Simulator UUID (mutually exclusive with simulator_name)
        simulator_name: Simulator name (mutually exclusive with simulator_id)
        platform: iOS Simulator (default), watchOS Simulator, tvOS Simulator or visionOS Simulator
        configuration: Build configuration (default Debug)
        derived_data_path: Where build products and intermediates go
        extra_args: Additional xcodebuild arguments
        use_latest_os: With simulator_name, pick the latest OS (default true)

    Returns:
        The simulator, bundle id and log capture options, or the step that failed.
    """
    return await run_operation(ctx, BUILD_RUN_SIM, dict(
        scheme=scheme,
        project_path=project_path,
        workspace_path=workspace_path,
        simulator_id=simulator_id,
        simulator_name=simulator_name,
        platform=platform,
        configuration=configuration,
        derived_data_path=derived_data_path,
        extra_args=extra_args,
        use_latest_os=use_latest_os,
    ))
