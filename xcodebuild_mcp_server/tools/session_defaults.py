#!/usr/bin/env python3
"""Session default tools - set, show and clear per-session parameter defaults"""

import json
from typing import Dict, List, Optional

from mcp.server.fastmcp import Context

from xcodebuild_mcp_server.exceptions import ValidationError, XcodeBuildMCPError
from xcodebuild_mcp_server.server import get_state, mcp, session_id_for
from xcodebuild_mcp_server.session import EXCLUSIVE_PAIRS, SessionStore
from xcodebuild_mcp_server.utils.log import log


def _defaults_store(ctx: Context) -> SessionStore:
    store = get_state(ctx).defaults_store
    if store is None:
        raise XcodeBuildMCPError("Session defaults are disabled for this server "
                                 "(--disable-session-defaults). Pass all parameters explicitly.")
    return store


def format_defaults(defaults: Dict) -> str:
    if not defaults:
        return "No session defaults are set."
    return "Current session defaults:\n" + json.dumps(defaults, indent=2, sort_keys=True)


@mcp.tool()
async def session_set_defaults(ctx: Context,
                               scheme: Optional[str] = None,
                               project_path: Optional[str] = None,
                               workspace_path: Optional[str] = None,
                               configuration: Optional[str] = None,
                               simulator_id: Optional[str] = None,
                               simulator_name: Optional[str] = None,
                               platform: Optional[str] = None,
                               device_id: Optional[str] = None,
                               arch: Optional[str] = None,
                               use_latest_os: Optional[bool] = None,
                               derived_data_path: Optional[str] = None,
                               extra_args: Optional[List[str]] = None,
                               test_runner_env: Optional[Dict[str, str]] = None):
    """
    Store parameter values used by every later call in this session.

    Explicit arguments on a tool call always win over these defaults. Setting
    project_path clears a stored workspace_path (and vice versa); the same goes
    for simulator_id and simulator_name.

    Returns:
        The session's defaults after the update
    """
    fields = dict(
        scheme=scheme,
        project_path=project_path,
        workspace_path=workspace_path,
        configuration=configuration,
        simulator_id=simulator_id,
        simulator_name=simulator_name,
        platform=platform,
        device_id=device_id,
        arch=arch,
        use_latest_os=use_latest_os,
        derived_data_path=derived_data_path,
        extra_args=extra_args,
        test_runner_env=test_runner_env,
    )
    for first, second in EXCLUSIVE_PAIRS:
        if fields[first] is not None and fields[second] is not None:
            raise ValidationError(f"{first} and {second} are mutually exclusive. Provide only one.")

    session_id = session_id_for(ctx)
    defaults = _defaults_store(ctx).set_defaults(session_id, **fields)
    log("debug", f"Session '{session_id}' defaults updated: {sorted(defaults)}")
    return format_defaults(defaults)


@mcp.tool()
async def session_show_defaults(ctx: Context):
    """Show the parameter defaults stored for this session"""
    return format_defaults(_defaults_store(ctx).get(session_id_for(ctx)))


@mcp.tool()
async def session_clear_defaults(ctx: Context, keys: Optional[List[str]] = None):
    """
    Clear stored defaults for this session.

    Args:
        keys: Names of the defaults to clear. Omit to clear all of them.
    """
    store = _defaults_store(ctx)
    session_id = session_id_for(ctx)
    store.clear(session_id, keys)
    if keys:
        return f"Cleared session defaults: {', '.join(keys)}\n\n" + format_defaults(store.get(session_id))
    return "Cleared all session defaults."
