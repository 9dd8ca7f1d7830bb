import pytest

from xcodebuild_mcp_server.exceptions import ValidationError
from xcodebuild_mcp_server.models import SIMULATOR_PLATFORMS, TargetDescriptor, XcodePlatform
from xcodebuild_mcp_server.utils.destination import resolve_destination


@pytest.mark.parametrize("platform", SIMULATOR_PLATFORMS)
@pytest.mark.parametrize("use_latest_os", [None, True, False])
def test_simulator_id_pins_device_and_ignores_latest_os(platform, use_latest_os):
    target = TargetDescriptor(platform=platform, simulator_id="U", use_latest_os=use_latest_os)

    destination = resolve_destination(target)

    assert destination == f"platform={platform.value},id=U"
    assert "OS=latest" not in destination


def test_simulator_name_defaults_to_latest_os():
    target = TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR, simulator_name="iPhone 16")
    assert resolve_destination(target) == "platform=iOS Simulator,name=iPhone 16,OS=latest"


def test_simulator_name_without_latest_os():
    target = TargetDescriptor(platform=XcodePlatform.TVOS_SIMULATOR,
                              simulator_name="Apple TV", use_latest_os=False)
    assert resolve_destination(target) == "platform=tvOS Simulator,name=Apple TV"


def test_simulator_without_id_or_name_is_rejected():
    target = TargetDescriptor(platform=XcodePlatform.IOS_SIMULATOR)
    with pytest.raises(ValidationError) as exc:
        resolve_destination(target)
    assert exc.value.message == "either simulator_id or simulator_name must be provided"


def test_macos_with_and_without_arch():
    assert resolve_destination(TargetDescriptor(platform=XcodePlatform.MACOS)) == "platform=macOS"
    assert resolve_destination(
        TargetDescriptor(platform=XcodePlatform.MACOS, arch="arm64")) == "platform=macOS,arch=arm64"


@pytest.mark.parametrize("platform", ["iOS", "watchOS", "tvOS", "visionOS"])
def test_device_without_id_uses_generic_destination(platform):
    target = TargetDescriptor(platform=XcodePlatform.parse(platform))
    assert resolve_destination(target) == f"generic/platform={platform}"


def test_device_with_id():
    target = TargetDescriptor(platform=XcodePlatform.IOS, device_id="00008110-000A")
    assert resolve_destination(target) == "platform=iOS,id=00008110-000A"


def test_resolution_is_repeatable():
    target = TargetDescriptor(platform=XcodePlatform.WATCHOS_SIMULATOR, simulator_name="Apple Watch")
    assert resolve_destination(target) == resolve_destination(target)


def test_unknown_platform_is_rejected():
    with pytest.raises(ValidationError) as exc:
        XcodePlatform.parse("Android")
    assert exc.value.message == "unsupported platform: Android"


def test_target_from_fields_drops_latest_os_with_simulator_id(capsys):
    target = TargetDescriptor.from_fields({"simulator_id": "U", "use_latest_os": True})

    assert target.platform is XcodePlatform.IOS_SIMULATOR
    assert target.use_latest_os is None
    assert "use_latest_os parameter is ignored" in capsys.readouterr().err


def test_target_from_fields_rejects_unknown_arch():
    with pytest.raises(ValidationError):
        TargetDescriptor.from_fields({"platform": "macOS", "arch": "ppc"}, XcodePlatform.MACOS)
