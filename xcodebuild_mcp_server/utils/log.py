#!/usr/bin/env python3
"""Logging to stderr (stdout belongs to the MCP stdio transport)"""

import sys

# Global debug setting - initialized by CLI
DEBUG_ENABLED = False

_LEVEL_PREFIXES = {
    "debug": "Debug",
    "info": "Info",
    "warning": "Warning",
    "error": "Error",
}


def set_debug_enabled(enabled: bool):
    """Set the global debug logging setting"""
    global DEBUG_ENABLED
    DEBUG_ENABLED = enabled


def log(level: str, message: str):
    """Write a log line to stderr, e.g. log("warning", "Simulator app did not open")"""
    if level == "debug" and not DEBUG_ENABLED:
        return
    prefix = _LEVEL_PREFIXES.get(level, level.capitalize())
    print(f"{prefix}: {message}", file=sys.stderr)
