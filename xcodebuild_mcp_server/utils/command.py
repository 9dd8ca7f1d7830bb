#!/usr/bin/env python3
"""xcodebuild argument vectors"""

from typing import List, Optional

from xcodebuild_mcp_server.models import BuildParameters


def build_xcodebuild_command(params: BuildParameters,
                             destination: str,
                             action: str,
                             result_bundle_path: Optional[str] = None) -> List[str]:
    """
    Assemble the xcodebuild command line for an action.

    The order is fixed:
        xcodebuild -workspace|-project PATH -scheme S -configuration C
        -skipMacroValidation -destination D [-derivedDataPath P]
        [extra args...] [-resultBundlePath R] ACTION

    Args:
        params: Container, scheme and build settings
        destination: Value for -destination (see resolve_destination)
        action: xcodebuild action, e.g. "build" or "test"
        result_bundle_path: Where to write the .xcresult bundle (test only)

    Returns:
        The argument vector, starting with "xcodebuild"
    """
    command = ["xcodebuild", params.container_flag, params.container_path]
    command.extend(["-scheme", params.scheme])
    command.extend(["-configuration", params.configuration])
    command.append("-skipMacroValidation")
    command.extend(["-destination", destination])

    if params.derived_data_path:
        command.extend(["-derivedDataPath", params.derived_data_path])

    extra_args = list(params.extra_args)
    if result_bundle_path:
        extra_args.extend(["-resultBundlePath", result_bundle_path])
    command.extend(extra_args)

    command.append(action)
    return command


def build_settings_command(params: BuildParameters, destination: str) -> List[str]:
    """Command that prints the build settings used to locate the built product"""
    command = ["xcodebuild", "-showBuildSettings", params.container_flag, params.container_path]
    command.extend(["-scheme", params.scheme])
    command.extend(["-configuration", params.configuration])
    command.extend(["-destination", destination])
    if params.derived_data_path:
        command.extend(["-derivedDataPath", params.derived_data_path])
    command.extend(params.extra_args)
    return command
