#!/usr/bin/env python3
"""build_device tool - Build for a physical device"""

from typing import List, Optional

from mcp.server.fastmcp import Context

from xcodebuild_mcp_server.models import BuildRequest
from xcodebuild_mcp_server.server import mcp, run_operation
from xcodebuild_mcp_server.tools.common import (
    CONTAINER_REQUIREMENTS,
    DEVICE_DEFAULTS,
    DEVICE_FIELDS,
    device_label,
    parse_device_request,
)
from xcodebuild_mcp_server.utils.build import execute_xcodebuild
from xcodebuild_mcp_server.utils.dispatch import Operation


async def build_device_logic(request: BuildRequest, executor):
    return await execute_xcodebuild(request, executor, "build", device_label(request, "Build"))


BUILD_DEVICE = Operation(
    name="build_device",
    label="{platform} Device Build",
    action="build",
    body=build_device_logic,
    requirements=CONTAINER_REQUIREMENTS,
    defaults=DEVICE_DEFAULTS,
    parse=parse_device_request,
    fields=DEVICE_FIELDS,
)


@mcp.tool()
async def build_device(ctx: Context,
                       scheme: Optional[str] = None,
                       project_path: Optional[str] = None,
                       workspace_path: Optional[str] = None,
                       platform: Optional[str] = None,
                       device_id: Optional[str] = None,
                       configuration: Optional[str] = None,
                       derived_data_path: Optional[str] = None,
                       extra_args: Optional[List[str]] = None):
    """
    Build for a physical device.

    Without device_id the build targets the generic device destination, which
    needs no connected hardware.

    Args:
        scheme: The scheme to build
        project_path: Path to a .xcodeproj (mutually exclusive with workspace_path)
        workspace_path: Path to a .xcworkspace (mutually exclusive with project_path)
        platform: iOS (default), watchOS, tvOS or visionOS
        device_id: UDID of a connected device
        configuration: Build configuration (default Debug)
        derived_data_path: Where build products and intermediates go
        extra_args: Additional xcodebuild arguments, e.g. ["-allowProvisioningUpdates"]
    """
    return await run_operation(ctx, BUILD_DEVICE, dict(
        scheme=scheme,
        project_path=project_path,
        workspace_path=workspace_path,
        platform=platform,
        device_id=device_id,
        configuration=configuration,
        derived_data_path=derived_data_path,
        extra_args=extra_args,
    ))
