#!/usr/bin/env python3
"""Command line entry point: parse flags, configure, run the server over stdio"""

import argparse
import sys

import xcodebuild_mcp_server
from xcodebuild_mcp_server.config import COMMAND_TIMEOUT_ENV, DEBUG_ENV, DISABLE_SESSION_DEFAULTS_ENV, load_config
from xcodebuild_mcp_server.server import mcp, set_server_config
from xcodebuild_mcp_server.utils.log import log, set_debug_enabled


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="XcodeBuild MCP Server")
    parser.add_argument("--version", action="version",
                        version=f"xcodebuild-mcp-server {xcodebuild_mcp_server.__version__}")
    parser.add_argument("--debug", action="store_true",
                        help=f"Enable debug logging to stderr (env: {DEBUG_ENV})")
    parser.add_argument("--no-debug", action="store_true",
                        help="Disable debug logging even if enabled in the environment")
    parser.add_argument("--disable-session-defaults", action="store_true",
                        help=f"Turn off session defaults (env: {DISABLE_SESSION_DEFAULTS_ENV})")
    parser.add_argument("--command-timeout", type=float, default=None, metavar="SECONDS",
                        help=f"Kill any external command running longer than this (env: {COMMAND_TIMEOUT_ENV})")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.debug and args.no_debug:
        print("Error: Cannot use both --debug and --no-debug", file=sys.stderr)
        sys.exit(1)

    debug = None
    if args.debug:
        debug = True
    elif args.no_debug:
        debug = False

    config = load_config(
        debug=debug,
        disable_session_defaults=True if args.disable_session_defaults else None,
        command_timeout=args.command_timeout,
    )
    set_debug_enabled(config.debug)
    set_server_config(config)

    # Importing the tools package registers every tool with the server
    import xcodebuild_mcp_server.tools  # noqa: F401

    log("debug", f"Configuration: {config}")
    mcp.run()


if __name__ == "__main__":
    main()
