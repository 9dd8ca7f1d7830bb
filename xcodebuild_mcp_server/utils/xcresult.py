#!/usr/bin/env python3
"""xcresult bundle utilities"""

import json
import os
from typing import Any, Dict, List

from xcodebuild_mcp_server.exceptions import ParseError, ResourceError
from xcodebuild_mcp_server.utils.executor import CommandExecutor, execute_checked
from xcodebuild_mcp_server.utils.log import log


def format_test_summary(summary: Dict[str, Any]) -> str:
    """
    Format the JSON from `xcresulttool get test-results summary` as text.

    Args:
        summary: Parsed summary JSON

    Returns:
        Human readable summary with counts, device, failures and insights
    """
    lines: List[str] = []

    lines.append(f"Test Summary: {summary.get('title') or 'Unknown'}")
    lines.append(f"Overall Result: {summary.get('result') or 'Unknown'}")
    lines.append("")

    lines.append("Test Counts:")
    lines.append(f"  Total: {summary.get('totalTestCount') or 0}")
    lines.append(f"  Passed: {summary.get('passedTests') or 0}")
    lines.append(f"  Failed: {summary.get('failedTests') or 0}")
    lines.append(f"  Skipped: {summary.get('skippedTests') or 0}")
    lines.append(f"  Expected Failures: {summary.get('expectedFailures') or 0}")
    lines.append("")

    if summary.get("environmentDescription"):
        lines.append(f"Environment: {summary['environmentDescription']}")
        lines.append("")

    devices = summary.get("devicesAndConfigurations")
    if isinstance(devices, list) and devices:
        device = devices[0].get("device") if isinstance(devices[0], dict) else None
        if device:
            lines.append(f"Device: {device.get('deviceName') or 'Unknown'} "
                         f"({device.get('platform') or 'Unknown'} {device.get('osVersion') or 'Unknown'})")
            lines.append("")

    failures = summary.get("testFailures")
    if isinstance(failures, list) and failures:
        lines.append("Test Failures:")
        for index, failure in enumerate(failures, 1):
            lines.append(f"  {index}. {failure.get('testName') or 'Unknown Test'} "
                         f"({failure.get('targetName') or 'Unknown Target'})")
            if failure.get("failureText"):
                lines.append(f"     {failure['failureText']}")
        lines.append("")

    insights = summary.get("topInsights")
    if isinstance(insights, list) and insights:
        lines.append("Insights:")
        for index, insight in enumerate(insights, 1):
            lines.append(f"  {index}. [{insight.get('impact') or 'Unknown'}] "
                         f"{insight.get('text') or 'No description'}")

    return "\n".join(lines)


async def parse_xcresult_bundle(xcresult_path: str, executor: CommandExecutor) -> str:
    """
    Summarize a test result bundle.

    Args:
        xcresult_path: Path to the .xcresult bundle
        executor: Executor used to run xcresulttool

    Returns:
        Formatted test summary

    Raises:
        ResourceError: If the bundle does not exist
        ExecutionError: If xcresulttool fails
        ParseError: If xcresulttool output is not a JSON object
    """
    if not os.path.exists(xcresult_path):
        raise ResourceError(f"xcresult bundle not found at {xcresult_path}")

    result = await execute_checked(
        executor,
        ["xcrun", "xcresulttool", "get", "test-results", "summary", "--path", xcresult_path],
        "Parse xcresult",
    )

    try:
        summary = json.loads(result.output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse xcresult summary: {e}")

    if not isinstance(summary, dict):
        raise ParseError("Failed to parse xcresult summary: expected a JSON object")

    try:
        formatted = format_test_summary(summary)
    except (AttributeError, TypeError) as e:
        raise ParseError(f"Unexpected xcresult summary structure: {e}")

    log("debug", f"Parsed xcresult bundle at {xcresult_path}")
    return formatted
