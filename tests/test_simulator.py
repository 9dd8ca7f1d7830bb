import json

import pytest

from xcodebuild_mcp_server.exceptions import ParseError, ResourceError
from xcodebuild_mcp_server.models import TargetDescriptor, XcodePlatform
from xcodebuild_mcp_server.utils.simulator import (
    SimulatorDevice,
    ensure_booted,
    find_simulator,
    locate_simulator,
    open_simulator_app,
    parse_device_list,
)

DEVICE_LIST = json.dumps({
    "devices": {
        "com.apple.CoreSimulator.SimRuntime.iOS-17-5": [
            {"name": "iPhone 15", "udid": "OLD", "state": "Shutdown", "isAvailable": False},
        ],
        "com.apple.CoreSimulator.SimRuntime.iOS-18-2": [
            {"name": "iPhone 15", "udid": "NEW", "state": "Booted", "isAvailable": True},
            {"name": "iPhone 16", "udid": "U", "state": "Shutdown", "isAvailable": True},
            {"name": "Broken"},
        ],
    }
})


def test_parse_device_list():
    devices = parse_device_list(DEVICE_LIST)

    assert [device.udid for device in devices] == ["OLD", "NEW", "U"]
    assert devices[0].is_available is False
    assert devices[1].is_booted
    assert devices[2].runtime == "com.apple.CoreSimulator.SimRuntime.iOS-18-2"


@pytest.mark.parametrize("output", ["not json", "[]", '{"runtimes": {}}'])
def test_parse_device_list_rejects_malformed_output(output):
    with pytest.raises(ParseError):
        parse_device_list(output)


def test_find_by_name_skips_unavailable_devices():
    devices = parse_device_list(DEVICE_LIST)

    assert find_simulator(devices, simulator_name="iPhone 15").udid == "NEW"
    assert find_simulator(devices, simulator_id="OLD").udid == "OLD"
    assert find_simulator(devices, simulator_name="iPad") is None


@pytest.mark.asyncio
async def test_locate_simulator_lists_available_devices(executor, results):
    executor.default = results.ok(DEVICE_LIST)
    target = TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR, simulator_name="iPhone 16")

    device = await locate_simulator(target, executor)

    assert device.udid == "U"
    assert executor.commands == [["xcrun", "simctl", "list", "devices", "available", "--json"]]


@pytest.mark.asyncio
async def test_locate_simulator_not_found(executor, results):
    executor.default = results.ok(DEVICE_LIST)

    with pytest.raises(ResourceError) as exc:
        await locate_simulator(TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR, simulator_id="NOPE"), executor)
    assert exc.value.message == "could not find simulator with UUID: NOPE"

    with pytest.raises(ResourceError) as exc:
        await locate_simulator(TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR, simulator_name="iPad"), executor)
    assert exc.value.message == "could not find an available simulator named 'iPad'"


@pytest.mark.asyncio
async def test_ensure_booted(executor):
    booted = SimulatorDevice(name="iPhone 16", udid="U", state="Booted", runtime="r")
    shutdown = SimulatorDevice(name="iPhone 16", udid="U", state="Shutdown", runtime="r")

    assert await ensure_booted(booted, executor) is False
    assert executor.calls == []

    assert await ensure_booted(shutdown, executor) is True
    assert executor.commands == [["xcrun", "simctl", "boot", "U"]]


@pytest.mark.asyncio
async def test_open_simulator_app_failure_is_not_raised(executor, results, capsys):
    executor.default = results.failed(error="Unable to find application named 'Simulator'")

    assert await open_simulator_app(executor) is False
    assert "Could not open Simulator app" in capsys.readouterr().err
