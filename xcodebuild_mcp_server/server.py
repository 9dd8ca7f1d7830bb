#!/usr/bin/env python3
"""MCP server instance and per-server state"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Mapping, Optional

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

from xcodebuild_mcp_server.config import ServerConfig
from xcodebuild_mcp_server.models import ToolResponse
from xcodebuild_mcp_server.session import DEFAULT_SESSION_ID, SessionStore
from xcodebuild_mcp_server.utils.dispatch import Operation, dispatch
from xcodebuild_mcp_server.utils.executor import CommandExecutor, SubprocessExecutor
from xcodebuild_mcp_server.utils.log import log

# Global server configuration - initialized by CLI
SERVER_CONFIG = ServerConfig()


def set_server_config(config: ServerConfig):
    """Set the configuration used when the server starts"""
    global SERVER_CONFIG
    SERVER_CONFIG = config


@dataclass
class ServerState:
    """Everything tools share for the lifetime of one server"""
    config: ServerConfig
    executor: CommandExecutor
    session_store: SessionStore

    @property
    def defaults_store(self) -> Optional[SessionStore]:
        """The session store, or None when session defaults are disabled"""
        if self.config.session_defaults_enabled:
            return self.session_store
        return None


def create_server_state(config: ServerConfig) -> ServerState:
    return ServerState(
        config=config,
        executor=SubprocessExecutor(timeout=config.command_timeout),
        session_store=SessionStore(),
    )


@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[ServerState]:
    state = create_server_state(SERVER_CONFIG)
    log("info", f"Server started (session defaults "
                f"{'enabled' if state.config.session_defaults_enabled else 'disabled'}, "
                f"command timeout: {state.config.command_timeout or 'none'})")
    try:
        yield state
    finally:
        state.session_store.clear_all()
        log("info", "Server stopped")


# Initialize the MCP server
mcp = FastMCP("XcodeBuild MCP Server",
    instructions="""
        This server builds, runs and tests Xcode projects and workspaces with
        xcodebuild and simctl. Every build and test tool needs a scheme and
        exactly one of project_path (.xcodeproj) or workspace_path (.xcworkspace).
        Simulator tools also need exactly one of simulator_id or simulator_name.

        Values repeated on every call (project, scheme, simulator) can be stored
        once with `session_set_defaults`; explicit arguments always win.

        Available tools:
        - build_sim / build_run_sim / test_sim: Build, build and launch, or test on a simulator
        - build_macos / build_run_macos / test_macos: Build, build and launch, or test a macOS app
        - build_device / test_device: Build or test for a physical device
        - list_sims: List available simulators
        - session_set_defaults / session_show_defaults / session_clear_defaults: Manage session defaults
    """,
    lifespan=server_lifespan,
)


def get_state(ctx: Context) -> ServerState:
    return ctx.request_context.lifespan_context


def session_id_for(ctx: Context) -> str:
    """Identify the calling session; clients without an id share the default session"""
    return ctx.client_id or DEFAULT_SESSION_ID


def to_tool_result(response: ToolResponse) -> CallToolResult:
    """
    Convert a ToolResponse into an MCP tool result.

    Each content block stays a separate TextContent and error responses keep
    isError, so FastMCP passes the result through as is.
    """
    return CallToolResult(
        content=[TextContent(type="text", text=text) for text in response.texts],
        isError=response.is_error,
    )


async def run_operation(ctx: Context, operation: Operation, arguments: Mapping[str, Any]) -> CallToolResult:
    """Dispatch an operation with this server's executor and the caller's session defaults"""
    state = get_state(ctx)
    response = await dispatch(
        operation,
        arguments,
        state.executor,
        state.defaults_store,
        session_id_for(ctx),
    )
    return to_tool_result(response)
