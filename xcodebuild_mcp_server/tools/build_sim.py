#!/usr/bin/env python3
"""build_sim tool - Build for a simulator"""

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
from xcodebuild_mcp_server.utils.build import execute_xcodebuild
from xcodebuild_mcp_server.utils.dispatch import Operation


async def build_sim_logic(request: BuildRequest, executor):
    return await execute_xcodebuild(request, executor, "build", simulator_label(request, "Build"))


BUILD_SIM = Operation(
    name="build_sim",
    label="{platform} Build",
    action="build",
    body=build_sim_logic,
    requirements=SIMULATOR_REQUIREMENTS,
    defaults=SIMULATOR_DEFAULTS,
    parse=parse_simulator_request,
    fields=SIMULATOR_FIELDS,
)


@mcp.tool()
async def build_sim(ctx: Context,
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
    Build an app for a simulator.

    Args:
        scheme: The scheme to build
        project_path: Path to a .xcodeproj (mutually exclusive with workspace_path)
        workspace_path: Path to a .xcworkspace (mutually exclusive with project_path)
        simulator_id: Simulator UUID (mutually exclusive with simulator_name)
        simulator_name: Simulator name, e.g. "iPhone 16" (mutually exclusive with simulator_id)
        platform: iOS Simulator (default), watchOS Simulator, tvOS Simulator or visionOS Simulator
        configuration: Build configuration (default Debug)
        derived_data_path: Where build products and intermediates go
        extra_args: Additional xcodebuild arguments, passed through in order
        use_latest_os: With simulator_name, pick the latest OS (default true). Ignored with simulator_id.

    Returns:
        Build warnings, the build result and suggested next steps.
    """
    return await run_operation(ctx, BUILD_SIM, dict(
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
