from xcodebuild_mcp_server.models import BuildParameters, ExecutionResult, TargetDescriptor, XcodePlatform
from xcodebuild_mcp_server.utils.output import extract_build_messages, interpret_build_result, next_steps

PARAMS = BuildParameters(scheme="S", project_path="/p/App.xcodeproj")
SIMULATOR = TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR, simulator_id="U")


def test_failure_lists_stderr_lines_then_summary():
    result = ExecutionResult(success=False, output="", error="error: X")

    response = interpret_build_result(result, PARAMS, SIMULATOR, "build", "iOS Simulator Build")

    assert response.is_error
    assert response.texts == [
        "❌ [stderr] error: X",
        "❌ iOS Simulator Build build failed for scheme S.",
    ]
    assert response.to_dict()["isError"] is True


def test_success_starts_with_warnings_then_summary_then_next_steps():
    result = ExecutionResult(success=True, output="warning: Y\nBUILD SUCCEEDED")

    response = interpret_build_result(result, PARAMS, SIMULATOR, "build", "iOS Simulator Build")

    assert not response.is_error
    assert "isError" not in response.to_dict()
    assert response.texts[0] == "⚠️ Warning: warning: Y"
    assert response.texts[1] == "✅ iOS Simulator Build build succeeded for scheme S."
    assert response.texts[2].startswith("Next Steps:")
    assert "build_run_sim(project_path='/p/App.xcodeproj', scheme='S', simulator_id='U')" in response.texts[2]


def test_error_lines_from_stdout_are_reported_in_order():
    output = "a.swift:1: warning: unused variable\nb.swift:2: error: cannot find 'x'\nc.swift:3: Warning: shadowed"

    messages = extract_build_messages(output, "ld: warning: duplicate library\nfatal")

    assert messages == [
        "⚠️ Warning: a.swift:1: warning: unused variable",
        "❌ Error: b.swift:2: error: cannot find 'x'",
        "⚠️ Warning: c.swift:3: Warning: shadowed",
        "⚠️ Warning: ld: warning: duplicate library",
    ]


def test_warning_and_stderr_blocks_on_failure():
    result = ExecutionResult(success=False, output="warning: deprecated API",
                             error="xcodebuild: error: Unable to find a destination\n\n  hint\n")

    response = interpret_build_result(result, PARAMS, SIMULATOR, "test", "iOS Simulator Test")

    assert response.texts == [
        "⚠️ Warning: warning: deprecated API",
        "❌ [stderr] xcodebuild: error: Unable to find a destination",
        "❌ [stderr]   hint",
        "❌ iOS Simulator Test test failed for scheme S.",
    ]


def test_test_action_has_no_next_steps():
    response = interpret_build_result(ExecutionResult(success=True), PARAMS, SIMULATOR, "test", "iOS Simulator Test")

    assert response.texts == ["✅ iOS Simulator Test test succeeded for scheme S."]


def test_next_steps_depend_on_platform():
    macos = next_steps(PARAMS, TargetDescriptor(platform=XcodePlatform.MACOS), "build")
    device = next_steps(PARAMS, TargetDescriptor(platform=XcodePlatform.IOS, device_id="D1"), "build")
    by_name = next_steps(PARAMS, TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR,
                                                  simulator_name="iPhone 16"), "build")

    assert "build_run_macos(project_path='/p/App.xcodeproj', scheme='S')" in macos
    assert "test_device(project_path='/p/App.xcodeproj', scheme='S', device_id='D1')" in device
    assert "simulator_name='iPhone 16'" in by_name
    assert "list_sims()" in by_name
