#!/usr/bin/env python3
"""Requirement groups and parameter records shared by the build tools"""

from typing import Any, Dict

from xcodebuild_mcp_server.exceptions import ValidationError
from xcodebuild_mcp_server.models import (
    DEVICE_PLATFORMS,
    SIMULATOR_PLATFORMS,
    BuildRequest,
    ValidationRequirement,
    XcodePlatform,
)

CONTAINER_REQUIREMENTS = (
    ValidationRequirement.all_of("scheme"),
    ValidationRequirement.one_of("project_path", "workspace_path"),
)

SIMULATOR_REQUIREMENTS = CONTAINER_REQUIREMENTS + (
    ValidationRequirement.one_of("simulator_id", "simulator_name"),
)

DEVICE_TEST_REQUIREMENTS = CONTAINER_REQUIREMENTS + (
    ValidationRequirement.all_of("device_id"),
)


def _accepted_fields(*names: str, **choices) -> Dict[str, Any]:
    fields: Dict[str, Any] = dict.fromkeys(names)
    fields.update(choices)
    return fields


_BUILD_FIELDS = ("scheme", "project_path", "workspace_path", "configuration", "derived_data_path", "extra_args")

SIMULATOR_FIELDS = _accepted_fields(
    *_BUILD_FIELDS, "simulator_id", "simulator_name", "use_latest_os",
    platform=tuple(p.value for p in SIMULATOR_PLATFORMS),
)
MACOS_FIELDS = _accepted_fields(*_BUILD_FIELDS, "arch")
DEVICE_FIELDS = _accepted_fields(
    *_BUILD_FIELDS, "device_id",
    platform=tuple(p.value for p in DEVICE_PLATFORMS),
)


def with_test_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    extended = dict(fields)
    extended["test_runner_env"] = None
    return extended


SIMULATOR_DEFAULTS = {"configuration": "Debug", "platform": XcodePlatform.IOS_SIMULATOR.value}
MACOS_DEFAULTS = {"configuration": "Debug", "platform": XcodePlatform.MACOS.value}
DEVICE_DEFAULTS = {"configuration": "Debug", "platform": XcodePlatform.IOS.value}


def _platform_names(platforms) -> str:
    return ", ".join(platform.value for platform in platforms)


def parse_simulator_request(params: Dict[str, Any]) -> BuildRequest:
    request = BuildRequest.from_fields(params, XcodePlatform.IOS_SIMULATOR)
    if not request.target.platform.is_simulator:
        raise ValidationError(f"platform must be one of: {_platform_names(SIMULATOR_PLATFORMS)}")
    return request


def parse_macos_request(params: Dict[str, Any]) -> BuildRequest:
    request = BuildRequest.from_fields(params, XcodePlatform.MACOS)
    if request.target.platform is not XcodePlatform.MACOS:
        raise ValidationError("platform must be macOS")
    return request


def parse_device_request(params: Dict[str, Any]) -> BuildRequest:
    request = BuildRequest.from_fields(params, XcodePlatform.IOS)
    if request.target.platform not in DEVICE_PLATFORMS:
        raise ValidationError(f"platform must be one of: {_platform_names(DEVICE_PLATFORMS)}")
    return request


def simulator_label(request: BuildRequest, verb: str) -> str:
    return f"{request.target.platform.value} {verb}"


def device_label(request: BuildRequest, verb: str) -> str:
    return f"{request.target.platform.value} Device {verb}"
