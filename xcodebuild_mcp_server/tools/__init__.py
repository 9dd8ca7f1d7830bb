"""Tool modules - importing this package registers every tool with the server"""

from xcodebuild_mcp_server.tools import (
    build_device,
    build_macos,
    build_run_macos,
    build_run_sim,
    build_sim,
    list_sims,
    session_defaults,
    test_device,
    test_macos,
    test_sim,
)

__all__ = [
    "build_device",
    "build_macos",
    "build_run_macos",
    "build_run_sim",
    "build_sim",
    "list_sims",
    "session_defaults",
    "test_device",
    "test_macos",
    "test_sim",
]
