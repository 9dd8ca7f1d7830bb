#!/usr/bin/env python3
"""Exception types raised by the build engine"""


class XcodeBuildMCPError(Exception):
    def __init__(self, message, code=None):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(XcodeBuildMCPError):
    """Missing or conflicting parameters. Always raised before any process runs."""
    pass


class ExecutionError(XcodeBuildMCPError):
    """A command exited non-zero or could not be spawned."""
    pass


class ResourceError(XcodeBuildMCPError):
    """A simulator, app bundle or bundle identifier could not be found."""
    pass


class ParseError(XcodeBuildMCPError):
    """Tool output (device listing, build settings, result bundle) was malformed."""
    pass
