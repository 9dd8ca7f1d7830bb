#!/usr/bin/env python3
"""Simulator discovery and boot state via simctl"""

import json
from dataclasses import dataclass
from typing import List, Optional

from xcodebuild_mcp_server.exceptions import ParseError, ResourceError, XcodeBuildMCPError
from xcodebuild_mcp_server.models import TargetDescriptor
from xcodebuild_mcp_server.utils.executor import CommandExecutor, execute_checked
from xcodebuild_mcp_server.utils.log import log


@dataclass(frozen=True)
class SimulatorDevice:
    """Represents a simulator device"""
    name: str
    udid: str
    state: str
    runtime: str
    is_available: bool = True

    @property
    def is_booted(self) -> bool:
        return self.state == "Booted"


def parse_device_list(output: str) -> List[SimulatorDevice]:
    """
    Parse `simctl list devices available --json` output.

    Entries missing a name, udid or state are skipped.

    Raises:
        ParseError: If the output isn't JSON or has no "devices" mapping
    """
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise ParseError(f"Failed to parse simulator list: {e}")

    runtimes = data.get("devices") if isinstance(data, dict) else None
    if not isinstance(runtimes, dict):
        raise ParseError("Failed to parse simulator list: missing 'devices' object")

    devices = []
    for runtime, entries in runtimes.items():
        if not isinstance(entries, list):
            continue
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            name, udid, state = entry.get("name"), entry.get("udid"), entry.get("state")
            if not all(isinstance(value, str) for value in (name, udid, state)):
                continue
            devices.append(SimulatorDevice(
                name=name,
                udid=udid,
                state=state,
                runtime=runtime,
                is_available=entry.get("isAvailable", True) is not False,
            ))
    return devices


async def list_available_simulators(executor: CommandExecutor) -> List[SimulatorDevice]:
    result = await execute_checked(
        executor,
        ["xcrun", "simctl", "list", "devices", "available", "--json"],
        "List Simulators",
    )
    return parse_device_list(result.output)


def find_simulator(devices: List[SimulatorDevice],
                   simulator_id: Optional[str] = None,
                   simulator_name: Optional[str] = None) -> Optional[SimulatorDevice]:
    """First device matching the UUID, or else the first available one with the name"""
    for device in devices:
        if simulator_id:
            if device.udid == simulator_id:
                return device
        elif device.name == simulator_name and device.is_available:
            return device
    return None


async def locate_simulator(target: TargetDescriptor, executor: CommandExecutor) -> SimulatorDevice:
    """
    Find the simulator a target refers to.

    Args:
        target: Target with a simulator_id or simulator_name
        executor: Process execution boundary

    Returns:
        The matching device, including its current state

    Raises:
        ResourceError: If no matching simulator is available
        ExecutionError: If simctl fails
        ParseError: If the simctl output can't be read
    """
    devices = await list_available_simulators(executor)
    device = find_simulator(devices, target.simulator_id, target.simulator_name)

    if device is None:
        if target.simulator_id:
            raise ResourceError(f"could not find simulator with UUID: {target.simulator_id}")
        raise ResourceError(f"could not find an available simulator named '{target.simulator_name}'")

    log("info", f"Using simulator {device.name} ({device.udid}), state: {device.state}")
    return device


async def ensure_booted(device: SimulatorDevice, executor: CommandExecutor) -> bool:
    """
    Boot the simulator unless it is already booted.

    Returns:
        True if a boot was performed

    Raises:
        ExecutionError: If booting fails
    """
    if device.is_booted:
        log("info", f"Simulator {device.udid} is already booted")
        return False

    log("info", f"Booting simulator {device.name}...")
    await execute_checked(executor, ["xcrun", "simctl", "boot", device.udid], "Boot Simulator")
    return True


async def open_simulator_app(executor: CommandExecutor) -> bool:
    """Bring up the Simulator UI. Failure is logged, never raised."""
    try:
        await execute_checked(executor, ["open", "-a", "Simulator"], "Open Simulator App")
        return True
    except XcodeBuildMCPError as e:
        log("warning", f"Could not open Simulator app: {e.message}")
        return False
