#!/usr/bin/env python3
"""Server configuration from environment variables and command line flags"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from xcodebuild_mcp_server.utils.log import log

DEBUG_ENV = "XCODEBUILDMCP_DEBUG"
DISABLE_SESSION_DEFAULTS_ENV = "XCODEBUILDMCP_DISABLE_SESSION_DEFAULTS"
COMMAND_TIMEOUT_ENV = "XCODEBUILDMCP_COMMAND_TIMEOUT"

_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ServerConfig:
    debug: bool = False
    session_defaults_enabled: bool = True
    command_timeout: Optional[float] = None


def parse_bool(name: str, value: Optional[str]) -> Optional[bool]:
    if value is None or not value.strip():
        return None
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    log("warning", f"Ignoring {name}={value!r}: expected one of {', '.join(_TRUE_VALUES + _FALSE_VALUES)}")
    return None


def parse_timeout(name: str, value: Optional[str]) -> Optional[float]:
    if value is None or not value.strip():
        return None
    try:
        timeout = float(value)
    except ValueError:
        log("warning", f"Ignoring {name}={value!r}: not a number")
        return None
    if timeout <= 0:
        log("warning", f"Ignoring {name}={value!r}: must be greater than zero")
        return None
    return timeout


def load_config(environ: Optional[Mapping[str, str]] = None,
                debug: Optional[bool] = None,
                disable_session_defaults: Optional[bool] = None,
                command_timeout: Optional[float] = None) -> ServerConfig:
    """
    Resolve the server configuration.

    Command line values (the keyword arguments) override the environment;
    anything unset in both keeps its default.

    Args:
        environ: Environment to read (defaults to os.environ)
        debug: --debug / --no-debug
        disable_session_defaults: --disable-session-defaults
        command_timeout: --command-timeout

    Returns:
        The resolved ServerConfig
    """
    if environ is None:
        environ = os.environ

    env_debug = parse_bool(DEBUG_ENV, environ.get(DEBUG_ENV))
    env_disable = parse_bool(DISABLE_SESSION_DEFAULTS_ENV, environ.get(DISABLE_SESSION_DEFAULTS_ENV))
    env_timeout = parse_timeout(COMMAND_TIMEOUT_ENV, environ.get(COMMAND_TIMEOUT_ENV))

    if debug is None:
        debug = bool(env_debug)
    if disable_session_defaults is None:
        disable_session_defaults = bool(env_disable)
    if command_timeout is None:
        command_timeout = env_timeout
    elif command_timeout <= 0:
        log("warning", f"Ignoring --command-timeout {command_timeout}: must be greater than zero")
        command_timeout = env_timeout

    return ServerConfig(
        debug=debug,
        session_defaults_enabled=not disable_session_defaults,
        command_timeout=command_timeout,
    )
