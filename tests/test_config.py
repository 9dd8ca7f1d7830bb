import pytest

from xcodebuild_mcp_server import __version__
from xcodebuild_mcp_server.__main__ import build_parser, main
from xcodebuild_mcp_server.config import ServerConfig, load_config


def test_defaults():
    assert load_config({}) == ServerConfig(debug=False, session_defaults_enabled=True, command_timeout=None)


def test_environment_values():
    config = load_config({
        "XCODEBUILDMCP_DEBUG": "yes",
        "XCODEBUILDMCP_DISABLE_SESSION_DEFAULTS": "1",
        "XCODEBUILDMCP_COMMAND_TIMEOUT": "600",
    })

    assert config.debug is True
    assert config.session_defaults_enabled is False
    assert config.command_timeout == 600.0


def test_command_line_overrides_environment():
    config = load_config({"XCODEBUILDMCP_DEBUG": "true", "XCODEBUILDMCP_COMMAND_TIMEOUT": "600"},
                         debug=False, command_timeout=30)

    assert config.debug is False
    assert config.command_timeout == 30


def test_invalid_values_are_ignored_with_a_warning(capsys):
    config = load_config({
        "XCODEBUILDMCP_DEBUG": "maybe",
        "XCODEBUILDMCP_COMMAND_TIMEOUT": "-5",
    })

    assert config.debug is False
    assert config.command_timeout is None
    err = capsys.readouterr().err
    assert "Warning: Ignoring XCODEBUILDMCP_DEBUG='maybe'" in err
    assert "Warning: Ignoring XCODEBUILDMCP_COMMAND_TIMEOUT='-5'" in err


def test_non_positive_command_line_timeout_falls_back_to_environment():
    config = load_config({"XCODEBUILDMCP_COMMAND_TIMEOUT": "90"}, command_timeout=0)

    assert config.command_timeout == 90.0


def test_parser_flags():
    args = build_parser().parse_args(["--debug", "--disable-session-defaults", "--command-timeout", "120"])

    assert args.debug and not args.no_debug
    assert args.disable_session_defaults
    assert args.command_timeout == 120.0


def test_conflicting_debug_flags_exit(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--debug", "--no-debug"])

    assert exc.value.code == 1
    assert "Cannot use both --debug and --no-debug" in capsys.readouterr().err


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--version"])

    assert exc.value.code == 0
    assert __version__ in capsys.readouterr().out
