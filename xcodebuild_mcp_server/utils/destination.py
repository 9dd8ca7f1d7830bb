#!/usr/bin/env python3
"""Destination strings for xcodebuild -destination"""

from xcodebuild_mcp_server.exceptions import ValidationError
from xcodebuild_mcp_server.models import TargetDescriptor, XcodePlatform


def resolve_destination(target: TargetDescriptor) -> str:
    """
    Compute the -destination value for a build target.

    Args:
        target: The platform and simulator/device/arch selection

    Returns:
        A destination string, e.g. "platform=iOS Simulator,name=iPhone 16,OS=latest"

    Raises:
        ValidationError: If a simulator platform has neither id nor name, or the
        platform is not supported
    """
    platform = XcodePlatform.parse(target.platform)

    if platform.is_simulator:
        if target.simulator_id:
            # A UUID already pins the OS version, so use_latest_os doesn't apply
            return f"platform={platform.value},id={target.simulator_id}"
        if target.simulator_name:
            destination = f"platform={platform.value},name={target.simulator_name}"
            if target.use_latest_os is None or target.use_latest_os:
                destination += ",OS=latest"
            return destination
        raise ValidationError("either simulator_id or simulator_name must be provided")

    if platform is XcodePlatform.MACOS:
        if target.arch:
            return f"platform=macOS,arch={target.arch}"
        return "platform=macOS"

    if target.device_id:
        return f"platform={platform.value},id={target.device_id}"
    return f"generic/platform={platform.value}"
