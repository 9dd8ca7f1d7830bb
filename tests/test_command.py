import pytest

from xcodebuild_mcp_server.exceptions import ValidationError
from xcodebuild_mcp_server.models import BuildParameters
from xcodebuild_mcp_server.utils.command import build_settings_command, build_xcodebuild_command


def test_workspace_build_argv():
    params = BuildParameters(scheme="S", workspace_path="/p/App.xcworkspace")

    command = build_xcodebuild_command(params, "platform=iOS Simulator,id=U", "build")

    assert command == [
        "xcodebuild",
        "-workspace", "/p/App.xcworkspace",
        "-scheme", "S",
        "-configuration", "Debug",
        "-skipMacroValidation",
        "-destination", "platform=iOS Simulator,id=U",
        "build",
    ]


def test_optional_arguments_keep_their_order():
    params = BuildParameters(
        scheme="S",
        project_path="/p/App.xcodeproj",
        configuration="Release",
        derived_data_path="/tmp/dd",
        extra_args=["-only-testing:AppTests/LoginTests", "-quiet"],
    )

    command = build_xcodebuild_command(params, "platform=macOS", "test", "/tmp/x/TestResults.xcresult")

    assert command == [
        "xcodebuild",
        "-project", "/p/App.xcodeproj",
        "-scheme", "S",
        "-configuration", "Release",
        "-skipMacroValidation",
        "-destination", "platform=macOS",
        "-derivedDataPath", "/tmp/dd",
        "-only-testing:AppTests/LoginTests", "-quiet",
        "-resultBundlePath", "/tmp/x/TestResults.xcresult",
        "test",
    ]


def test_build_settings_argv():
    params = BuildParameters(scheme="S", project_path="/p/App.xcodeproj", derived_data_path="/tmp/dd")

    command = build_settings_command(params, "platform=macOS")

    assert command == [
        "xcodebuild", "-showBuildSettings",
        "-project", "/p/App.xcodeproj",
        "-scheme", "S",
        "-configuration", "Debug",
        "-destination", "platform=macOS",
        "-derivedDataPath", "/tmp/dd",
    ]
    assert "-skipMacroValidation" not in command


def test_container_is_required():
    with pytest.raises(ValidationError) as exc:
        BuildParameters(scheme="S")
    assert exc.value.message == "Either project_path or workspace_path is required."


def test_container_paths_are_exclusive():
    with pytest.raises(ValidationError) as exc:
        BuildParameters(scheme="S", project_path="/p/A.xcodeproj", workspace_path="/p/A.xcworkspace")
    assert exc.value.message == "project_path and workspace_path are mutually exclusive. Provide only one."


def test_extra_args_are_frozen():
    extra = ["-quiet"]
    params = BuildParameters(scheme="S", project_path="/p/A.xcodeproj", extra_args=extra)
    extra.append("-verbose")

    assert params.extra_args == ("-quiet",)
