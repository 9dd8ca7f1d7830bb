#!/usr/bin/env python3
"""Build and run: build -> app path -> simulator -> install -> bundle id -> launch"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from xcodebuild_mcp_server.exceptions import ResourceError, XcodeBuildMCPError
from xcodebuild_mcp_server.models import BuildRequest, ToolResponse
from xcodebuild_mcp_server.utils.build import execute_xcodebuild
from xcodebuild_mcp_server.utils.command import build_settings_command
from xcodebuild_mcp_server.utils.destination import resolve_destination
from xcodebuild_mcp_server.utils.executor import CommandExecutor, execute_checked
from xcodebuild_mcp_server.utils.log import log
from xcodebuild_mcp_server.utils.simulator import ensure_booted, locate_simulator, open_simulator_app

CODESIGNING_FOLDER_PATTERN = re.compile(r"CODESIGNING_FOLDER_PATH = (.+\.app)")
BUILT_PRODUCTS_DIR_PATTERN = re.compile(r"^\s*BUILT_PRODUCTS_DIR\s*=\s*(.+)$", re.MULTILINE)
FULL_PRODUCT_NAME_PATTERN = re.compile(r"^\s*FULL_PRODUCT_NAME\s*=\s*(.+)$", re.MULTILINE)


@dataclass(frozen=True)
class BundleIdStrategy:
    """One way of reading CFBundleIdentifier from a built .app"""
    name: str
    command: Callable[[str], List[str]]


BUNDLE_ID_STRATEGIES = (
    BundleIdStrategy("PlistBuddy", lambda app_path: [
        "/usr/libexec/PlistBuddy", "-c", "Print :CFBundleIdentifier", f"{app_path}/Info.plist"]),
    BundleIdStrategy("plutil", lambda app_path: [
        "plutil", "-extract", "CFBundleIdentifier", "raw", f"{app_path}/Info.plist"]),
    BundleIdStrategy("defaults", lambda app_path: [
        "defaults", "read", f"{app_path}/Info", "CFBundleIdentifier"]),
)


def build_succeeded_but(detail: str) -> ToolResponse:
    return ToolResponse.text(f"Build succeeded, but {detail}", is_error=True)


def extract_app_path(build_settings: str) -> Optional[str]:
    """
    Find the built .app in `xcodebuild -showBuildSettings` output.

    Prefers CODESIGNING_FOLDER_PATH; falls back to BUILT_PRODUCTS_DIR joined
    with FULL_PRODUCT_NAME.
    """
    match = CODESIGNING_FOLDER_PATTERN.search(build_settings)
    if match:
        return match.group(1).strip()

    products_dir = BUILT_PRODUCTS_DIR_PATTERN.search(build_settings)
    product_name = FULL_PRODUCT_NAME_PATTERN.search(build_settings)
    if products_dir and product_name:
        return f"{products_dir.group(1).strip()}/{product_name.group(1).strip()}"
    return None


async def resolve_app_path(request: BuildRequest, executor: CommandExecutor) -> str:
    """
    Ask xcodebuild where the built app is.

    Raises:
        ExecutionError: If -showBuildSettings fails
        ResourceError: If the output names no app bundle
    """
    command = build_settings_command(request.build, resolve_destination(request.target))
    result = await execute_checked(executor, command, "Get App Path")

    app_path = extract_app_path(result.output)
    if not app_path:
        raise ResourceError("could not find app path in build settings.")

    log("info", f"App bundle path for run: {app_path}")
    return app_path


async def resolve_bundle_id(app_path: str,
                            executor: CommandExecutor,
                            strategies: Sequence[BundleIdStrategy] = BUNDLE_ID_STRATEGIES) -> str:
    """
    Read the app's bundle identifier, trying each strategy in turn.

    Returns:
        The first non-empty identifier found

    Raises:
        ResourceError: If every strategy fails, listing each failure
    """
    failures = []
    for strategy in strategies:
        try:
            result = await executor.execute(strategy.command(app_path), f"Get Bundle ID with {strategy.name}")
        except XcodeBuildMCPError as e:
            failures.append(f"{strategy.name}: {e.message}")
            continue

        bundle_id = (result.output or "").strip()
        if result.success and bundle_id:
            log("info", f"Bundle ID for run: {bundle_id}")
            return bundle_id

        reason = (result.error or "").strip() or "no output"
        failures.append(f"{strategy.name}: {reason}")

    raise ResourceError("Could not extract bundle ID from Info.plist using any method ("
                        + "; ".join(failures) + ")")


async def build_and_run_simulator(request: BuildRequest,
                                  executor: CommandExecutor,
                                  label: str) -> ToolResponse:
    """
    Build an app, then install and launch it on a simulator.

    Each step runs only after the previous one finished. A failure after the
    build returns a "Build succeeded, but ..." error; opening the Simulator UI
    is best-effort.
    """
    params, target = request.build, request.target
    platform_name = target.platform.value

    build_response = await execute_xcodebuild(request, executor, "build", label)
    if build_response.is_error:
        return build_response

    try:
        app_path = await resolve_app_path(request, executor)
    except ResourceError as e:
        return build_succeeded_but(e.message)
    except XcodeBuildMCPError as e:
        return build_succeeded_but(f"failed to get app path: {e.message}")

    try:
        device = await locate_simulator(target, executor)
    except ResourceError as e:
        return build_succeeded_but(e.message)
    except XcodeBuildMCPError as e:
        return build_succeeded_but(f"error checking/booting simulator: {e.message}")

    try:
        await ensure_booted(device, executor)
    except XcodeBuildMCPError as e:
        log("error", f"Error booting simulator: {e.message}")
        return build_succeeded_but(f"error checking/booting simulator: {e.message}")

    await open_simulator_app(executor)

    try:
        log("info", f"Installing app at path: {app_path} to simulator: {device.udid}")
        await execute_checked(executor, ["xcrun", "simctl", "install", device.udid, app_path], "Install App")
    except XcodeBuildMCPError as e:
        log("error", f"Error installing app: {e.message}")
        return build_succeeded_but(f"error installing app on simulator: {e.message}")

    try:
        bundle_id = await resolve_bundle_id(app_path, executor)
    except XcodeBuildMCPError as e:
        log("error", f"Error getting bundle ID: {e.message}")
        return build_succeeded_but(f"error getting bundle ID: {e.message}")

    try:
        log("info", f"Launching app with bundle ID: {bundle_id} on simulator: {device.udid}")
        await execute_checked(executor, ["xcrun", "simctl", "launch", device.udid, bundle_id], "Launch App")
    except XcodeBuildMCPError as e:
        log("error", f"Error launching app: {e.message}")
        return build_succeeded_but(f"error launching app on simulator: {e.message}")

    log("info", f"✅ {platform_name} simulator build & run succeeded.")

    return ToolResponse.text(
        f"✅ {platform_name} simulator build and run succeeded for scheme {params.scheme} "
        f"from {params.container_kind} {params.container_path} targeting {target.simulator_ref}.\n"
        f"\n"
        f"The app ({bundle_id}) is now running on {device.name} ({device.udid}).\n"
        f"If you don't see the simulator window, it may be hidden behind other windows. "
        f"The Simulator app should be open.\n"
        f"\n"
        f"Next Steps:\n"
        f"- Option 1: Stream the app's structured logs (app keeps running):\n"
        f"  xcrun simctl spawn {device.udid} log stream --level debug "
        f"--predicate 'subsystem == \"{bundle_id}\"'\n"
        f"- Option 2: Relaunch with console output attached (app restarts):\n"
        f"  xcrun simctl launch --console-pty --terminate-running-process {device.udid} {bundle_id}\n"
        f"- Option 3: Rebuild and relaunch after changes:\n"
        f"  build_run_sim(scheme='{params.scheme}', {params.container_kind}_path='{params.container_path}')"
    )


async def build_and_run_macos(request: BuildRequest,
                              executor: CommandExecutor,
                              label: str) -> ToolResponse:
    """Build a macOS app and open it"""
    params = request.build

    build_response = await execute_xcodebuild(request, executor, "build", label)
    if build_response.is_error:
        return build_response

    try:
        app_path = await resolve_app_path(request, executor)
    except ResourceError as e:
        return build_succeeded_but(e.message)
    except XcodeBuildMCPError as e:
        return build_succeeded_but(f"failed to get app path: {e.message}")

    try:
        log("info", f"Launching macOS app at {app_path}")
        await execute_checked(executor, ["open", app_path], "Launch macOS App")
    except XcodeBuildMCPError as e:
        log("error", f"Error launching macOS app: {e.message}")
        return build_succeeded_but(f"error launching macOS app: {e.message}")

    return ToolResponse.text(
        f"✅ macOS build and run succeeded for scheme {params.scheme} "
        f"from {params.container_kind} {params.container_path}.\n"
        f"\n"
        f"The app ({app_path}) has been launched."
    )
