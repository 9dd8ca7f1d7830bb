import os
from dataclasses import dataclass
from types import SimpleNamespace
from typing import Dict, List, Optional

import pytest

from xcodebuild_mcp_server.config import ServerConfig
from xcodebuild_mcp_server.models import BuildRequest, ExecutionResult, XcodePlatform
from xcodebuild_mcp_server.server import ServerState
from xcodebuild_mcp_server.session import SessionStore
from xcodebuild_mcp_server.utils import log as log_module


@dataclass
class RecordedCall:
    command: List[str]
    log_prefix: Optional[str]
    use_shell: bool
    env: Optional[Dict[str, str]]


class MockExecutor:
    """
    Stand-in for the process boundary.

    Resolution order for each call: a handler callback, then the first rule
    whose argv prefix matches, then the queued results, then the default.
    A rule's `effect` runs before its result is returned; a rule with
    `raises` raises instead of returning.
    """

    def __init__(self, default=None, results=None, handler=None):
        self.default = default or ExecutionResult(success=True, output="", exit_code=0)
        self.results = list(results or [])
        self.handler = handler
        self.rules = []
        self.calls: List[RecordedCall] = []

    def on(self, *prefix, result=None, raises=None, effect=None):
        self.rules.append((list(prefix), result, raises, effect))
        return self

    async def execute(self, command, log_prefix=None, use_shell=False, env=None):
        command = list(command)
        self.calls.append(RecordedCall(command, log_prefix, use_shell, env))

        if self.handler is not None:
            return self.handler(command)

        for prefix, result, raises, effect in self.rules:
            if command[:len(prefix)] == prefix:
                if effect is not None:
                    effect(command)
                if raises is not None:
                    raise raises
                return result or self.default

        if self.results:
            return self.results.pop(0)
        return self.default

    @property
    def commands(self) -> List[List[str]]:
        return [call.command for call in self.calls]

    def calls_starting(self, *prefix) -> List[RecordedCall]:
        return [call for call in self.calls if call.command[:len(prefix)] == list(prefix)]


def ok(output="") -> ExecutionResult:
    return ExecutionResult(success=True, output=output, exit_code=0)


def failed(error="", output="", exit_code=1) -> ExecutionResult:
    return ExecutionResult(success=False, output=output, error=error, exit_code=exit_code)


def create_result_bundle(command):
    """Create the directory xcodebuild would write for -resultBundlePath"""
    os.makedirs(command[command.index("-resultBundlePath") + 1])


@pytest.fixture(autouse=True)
def _quiet_debug_logging():
    log_module.set_debug_enabled(False)
    yield
    log_module.set_debug_enabled(False)


@pytest.fixture
def executor():
    return MockExecutor()


@pytest.fixture
def results():
    """Factories for canned ExecutionResults"""
    return SimpleNamespace(ok=ok, failed=failed, create_result_bundle=create_result_bundle)


@pytest.fixture
def simulator_request():
    return BuildRequest.from_fields(
        {"scheme": "App", "project_path": "/p/App.xcodeproj", "simulator_id": "U"},
        XcodePlatform.IOS_SIMULATOR,
    )


@pytest.fixture
def macos_request():
    return BuildRequest.from_fields(
        {"scheme": "App", "project_path": "/p/App.xcodeproj"},
        XcodePlatform.MACOS,
    )


@pytest.fixture
def server_state(executor):
    return ServerState(config=ServerConfig(), executor=executor, session_store=SessionStore())


@pytest.fixture
def make_ctx(server_state):
    """Build a stand-in for the FastMCP Context a tool receives"""
    def _make(client_id=None, state=None):
        return SimpleNamespace(
            client_id=client_id,
            request_context=SimpleNamespace(lifespan_context=state or server_state),
        )
    return _make
