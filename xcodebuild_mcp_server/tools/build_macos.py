#!/usr/bin/env python3
"""build_macos tool - Build a macOS app"""

from typing import List, Optional

from mcp.server.fastmcp import Context

from xcodebuild_mcp_server.models import BuildRequest
from xcodebuild_mcp_server.server import mcp, run_operation
from xcodebuild_mcp_server.tools.common import (
    CONTAINER_REQUIREMENTS,
    MACOS_DEFAULTS,
    MACOS_FIELDS,
    parse_macos_request,
)
from xcodebuild_mcp_server.utils.build import execute_xcodebuild
from xcodebuild_mcp_server.utils.dispatch import Operation


async def build_macos_logic(request: BuildRequest, executor):
    return await execute_xcodebuild(request, executor, "build", "macOS Build")


BUILD_MACOS = Operation(
    name="build_macos",
    label="macOS Build",
    action="build",
    body=build_macos_logic,
    requirements=CONTAINER_REQUIREMENTS,
    defaults=MACOS_DEFAULTS,
    parse=parse_macos_request,
    fields=MACOS_FIELDS,
)


@mcp.tool()
async def build_macos(ctx: Context,
                      scheme: Optional[str] = None,
                      project_path: Optional[str] = None,
                      workspace_path: Optional[str] = None,
                      configuration: Optional[str] = None,
                      arch: Optional[str] = None,
                      derived_data_path: Optional[str] = None,
                      extra_args: Optional[List[str]] = None):
    """
    Build a macOS app.

    Args:
        scheme: The scheme to build
        project_path: Path to a .xcodeproj (mutually exclusive with workspace_path)
        workspace_path: Path to a .xcworkspace (mutually exclusive with project_path)
        configuration: Build configuration (default Debug)
        arch: arm64 or x86_64 (default: the host architecture)
        derived_data_path: Where build products and intermediates go
        extra_args: Additional xcodebuild arguments

    Returns:
        Build warnings, the build result and suggested next steps.
    """
    return await run_operation(ctx, BUILD_MACOS, dict(
        scheme=scheme,
        project_path=project_path,
        workspace_path=workspace_path,
        configuration=configuration,
        arch=arch,
        derived_data_path=derived_data_path,
        extra_args=extra_args,
    ))
