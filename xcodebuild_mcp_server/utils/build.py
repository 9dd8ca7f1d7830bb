#!/usr/bin/env python3
"""Build and test orchestration: destination -> argv -> executor -> response"""

import os
import shutil
import tempfile
from typing import Dict, Optional

from xcodebuild_mcp_server.exceptions import XcodeBuildMCPError
from xcodebuild_mcp_server.models import BuildRequest, ToolResponse
from xcodebuild_mcp_server.utils.command import build_xcodebuild_command
from xcodebuild_mcp_server.utils.destination import resolve_destination
from xcodebuild_mcp_server.utils.executor import CommandExecutor
from xcodebuild_mcp_server.utils.log import log
from xcodebuild_mcp_server.utils.output import interpret_build_result
from xcodebuild_mcp_server.utils.xcresult import parse_xcresult_bundle


def runner_environment(env: Optional[Dict[str, str]]) -> Optional[Dict[str, str]]:
    """Prefix keys with TEST_RUNNER_ so xcodebuild forwards them to the test process"""
    if not env:
        return None
    prefixed = {}
    for key, value in env.items():
        name = key if key.startswith("TEST_RUNNER_") else f"TEST_RUNNER_{key}"
        prefixed[name] = str(value)
    return prefixed


async def execute_xcodebuild(request: BuildRequest,
                             executor: CommandExecutor,
                             action: str,
                             label: str,
                             result_bundle_path: Optional[str] = None) -> ToolResponse:
    """
    Run one xcodebuild action and interpret the result.

    Args:
        request: Validated build parameters and target
        executor: Process execution boundary
        action: xcodebuild action, "build" or "test"
        label: Operation label used in messages, e.g. "iOS Simulator Build"
        result_bundle_path: .xcresult destination for test runs

    Returns:
        ToolResponse describing the outcome

    Raises:
        ValidationError: If no destination can be computed for the target
        ExecutionError: If xcodebuild could not be started
    """
    params = request.build
    log("info", f"Starting {label} {action} for scheme {params.scheme} "
                f"from {params.container_kind}: {params.container_path}")

    destination = resolve_destination(request.target)
    command = build_xcodebuild_command(params, destination, action, result_bundle_path)

    env = runner_environment(request.test_runner_env) if action == "test" else None
    result = await executor.execute(command, label, False, env)

    return interpret_build_result(result, params, request.target, action, label)


async def run_tests(request: BuildRequest,
                    executor: CommandExecutor,
                    label: str) -> ToolResponse:
    """
    Run `xcodebuild test` with a result bundle and append its summary.

    The bundle lives in a fresh temporary directory that is always removed
    afterwards. A missing or unreadable bundle leaves the primary result as is.
    """
    temp_dir = tempfile.mkdtemp(prefix="xcodebuild-test-")
    result_bundle_path = os.path.join(temp_dir, "TestResults.xcresult")

    try:
        test_response = await execute_xcodebuild(request, executor, "test", label, result_bundle_path)

        try:
            log("info", f"Attempting to parse xcresult bundle at: {result_bundle_path}")
            summary = await parse_xcresult_bundle(result_bundle_path, executor)
        except XcodeBuildMCPError as e:
            log("warning", f"Failed to parse xcresult bundle: {e.message}")
            return test_response

        return ToolResponse(
            content=test_response.content + [
                {"type": "text", "text": "\nTest Results Summary:\n" + summary},
            ],
            is_error=test_response.is_error,
        )
    finally:
        try:
            shutil.rmtree(temp_dir)
        except OSError as e:
            log("warning", f"Failed to clean up temporary directory {temp_dir}: {e}")
