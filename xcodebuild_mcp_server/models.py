#!/usr/bin/env python3
"""Typed records passed between the dispatcher, command builder and executor"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from xcodebuild_mcp_server.exceptions import ValidationError
from xcodebuild_mcp_server.utils.log import log


class XcodePlatform(str, Enum):
    IOS_SIMULATOR = "iOS Simulator"
    WATCHOS_SIMULATOR = "watchOS Simulator"
    TVOS_SIMULATOR = "tvOS Simulator"
    VISIONOS_SIMULATOR = "visionOS Simulator"
    IOS = "iOS"
    WATCHOS = "watchOS"
    TVOS = "tvOS"
    VISIONOS = "visionOS"
    MACOS = "macOS"

    @property
    def is_simulator(self) -> bool:
        return self.value.endswith(" Simulator")

    @classmethod
    def parse(cls, value: Any) -> "XcodePlatform":
        """
        Map a platform name to an XcodePlatform.

        Raises:
            ValidationError: If the name is not one of the supported platforms
        """
        if isinstance(value, cls):
            return value
        for platform in cls:
            if platform.value == value:
                return platform
        raise ValidationError(f"unsupported platform: {value}")


SIMULATOR_PLATFORMS = tuple(p for p in XcodePlatform if p.is_simulator)
DEVICE_PLATFORMS = (XcodePlatform.IOS, XcodePlatform.WATCHOS,
                    XcodePlatform.TVOS, XcodePlatform.VISIONOS)
SUPPORTED_ARCHS = ("arm64", "x86_64")


@dataclass(frozen=True)
class BuildParameters:
    """What to build: the container (project or workspace), scheme and build settings."""
    scheme: str
    project_path: Optional[str] = None
    workspace_path: Optional[str] = None
    configuration: str = "Debug"
    derived_data_path: Optional[str] = None
    extra_args: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.project_path and not self.workspace_path:
            raise ValidationError("Either project_path or workspace_path is required.")
        if self.project_path and self.workspace_path:
            raise ValidationError("project_path and workspace_path are mutually exclusive. Provide only one.")
        # Freeze caller lists so the record can't change under us
        object.__setattr__(self, "extra_args", tuple(self.extra_args or ()))

    @property
    def is_workspace(self) -> bool:
        return bool(self.workspace_path)

    @property
    def container_flag(self) -> str:
        return "-workspace" if self.is_workspace else "-project"

    @property
    def container_path(self) -> str:
        return self.workspace_path if self.is_workspace else self.project_path

    @property
    def container_kind(self) -> str:
        return "workspace" if self.is_workspace else "project"

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> "BuildParameters":
        return cls(
            scheme=fields["scheme"],
            project_path=fields.get("project_path"),
            workspace_path=fields.get("workspace_path"),
            configuration=fields.get("configuration") or "Debug",
            derived_data_path=fields.get("derived_data_path"),
            extra_args=tuple(fields.get("extra_args") or ()),
        )


@dataclass(frozen=True)
class TargetDescriptor:
    """Where to build: platform plus the simulator, device or architecture selector."""
    platform: XcodePlatform
    simulator_id: Optional[str] = None
    simulator_name: Optional[str] = None
    use_latest_os: Optional[bool] = None
    arch: Optional[str] = None
    device_id: Optional[str] = None

    @property
    def simulator_ref(self) -> str:
        """Human readable description of the selected simulator"""
        if self.simulator_id:
            return f"simulator UUID '{self.simulator_id}'"
        return f"simulator name '{self.simulator_name}'"

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any],
                    default_platform: XcodePlatform = XcodePlatform.IOS_SIMULATOR) -> "TargetDescriptor":
        """
        Build a TargetDescriptor from merged tool parameters.

        use_latest_os only selects an OS for a simulator chosen by name, so it is
        dropped (with a warning) when a simulator_id is also given.

        Raises:
            ValidationError: For an unknown platform or architecture
        """
        platform = XcodePlatform.parse(fields.get("platform") or default_platform)

        arch = fields.get("arch")
        if arch is not None and arch not in SUPPORTED_ARCHS:
            raise ValidationError(f"arch must be one of: {', '.join(SUPPORTED_ARCHS)}")

        simulator_id = fields.get("simulator_id")
        use_latest_os = fields.get("use_latest_os")
        if simulator_id and use_latest_os is not None:
            log("warning", "use_latest_os parameter is ignored when using simulator_id "
                           "(UUID implies exact device/OS)")
            use_latest_os = None

        return cls(
            platform=platform,
            simulator_id=simulator_id,
            simulator_name=fields.get("simulator_name"),
            use_latest_os=use_latest_os,
            arch=arch,
            device_id=fields.get("device_id"),
        )


@dataclass(frozen=True)
class BuildRequest:
    """Fully validated input for a build, test or run operation."""
    build: BuildParameters
    target: TargetDescriptor
    test_runner_env: Optional[Dict[str, str]] = None

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any],
                    default_platform: XcodePlatform = XcodePlatform.IOS_SIMULATOR) -> "BuildRequest":
        return cls(
            build=BuildParameters.from_fields(fields),
            target=TargetDescriptor.from_fields(fields, default_platform),
            test_runner_env=fields.get("test_runner_env"),
        )


@dataclass(frozen=True)
class ExecutionResult:
    """Raw result of one process invocation."""
    success: bool
    output: str = ""
    error: Optional[str] = None
    process_id: Optional[int] = None
    exit_code: Optional[int] = None


@dataclass
class ToolResponse:
    """The response returned for every operation, successful or not."""
    content: List[Dict[str, str]] = field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, message: str, is_error: bool = False) -> "ToolResponse":
        return cls(content=[{"type": "text", "text": message}], is_error=is_error)

    @classmethod
    def from_lines(cls, lines: List[str], is_error: bool = False) -> "ToolResponse":
        return cls(content=[{"type": "text", "text": line} for line in lines], is_error=is_error)

    @property
    def texts(self) -> List[str]:
        return [block["text"] for block in self.content]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"content": [dict(block) for block in self.content]}
        if self.is_error:
            result["isError"] = True
        return result


@dataclass(frozen=True)
class ValidationRequirement:
    """A group of parameters that must all be present, or exactly one present."""
    kind: str
    fields: Tuple[str, ...]

    ALL_OF = "all_of"
    ONE_OF = "one_of"

    @classmethod
    def all_of(cls, *fields: str) -> "ValidationRequirement":
        return cls(cls.ALL_OF, tuple(fields))

    @classmethod
    def one_of(cls, *fields: str) -> "ValidationRequirement":
        return cls(cls.ONE_OF, tuple(fields))
