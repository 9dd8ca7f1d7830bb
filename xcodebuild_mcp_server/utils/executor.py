#!/usr/bin/env python3
"""Process execution boundary

Everything that spawns a process goes through a CommandExecutor. The server
uses SubprocessExecutor; tests pass in their own implementation.
"""

import asyncio
import os
import shlex
from typing import Dict, List, Optional, Protocol

from xcodebuild_mcp_server.exceptions import ExecutionError
from xcodebuild_mcp_server.models import ExecutionResult
from xcodebuild_mcp_server.utils.log import log


class CommandExecutor(Protocol):
    async def execute(self,
                      command: List[str],
                      log_prefix: Optional[str] = None,
                      use_shell: bool = False,
                      env: Optional[Dict[str, str]] = None) -> ExecutionResult:
        ...


class SubprocessExecutor:
    """
    Run commands as child processes.

    One call is one process lifetime: the coroutine resolves once the process
    exits, with all of its stdout and stderr collected. There are no retries.
    A timeout is applied only when one is configured.
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout

    async def execute(self,
                      command: List[str],
                      log_prefix: Optional[str] = None,
                      use_shell: bool = False,
                      env: Optional[Dict[str, str]] = None) -> ExecutionResult:
        """
        Run a command and wait for it to exit.

        Args:
            command: Argument vector; command[0] is the program
            log_prefix: Label used in log lines, e.g. "Install App"
            use_shell: Run the joined command line through /bin/sh
            env: Extra environment variables layered over os.environ

        Returns:
            ExecutionResult with success=True iff the exit status was zero

        Raises:
            ExecutionError: If the process could not be started
        """
        command_line = shlex.join(command)
        log("info", f"Executing {log_prefix or 'command'}: {command_line}")

        process_env = None
        if env:
            process_env = dict(os.environ)
            process_env.update(env)

        try:
            if use_shell:
                process = await asyncio.create_subprocess_shell(
                    command_line,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    env=process_env,
                )
            else:
                process = await asyncio.create_subprocess_exec(
                    *command,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                    env=process_env,
                )
        except OSError as e:
            raise ExecutionError(f"Failed to start {command[0]}: {e}") from e

        try:
            if self.timeout is None:
                stdout, stderr = await process.communicate()
            else:
                stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            log("warning", f"{log_prefix or command[0]} timed out after {self.timeout} seconds")
            return ExecutionResult(
                success=False,
                output="",
                error=f"Command timed out after {self.timeout} seconds",
                process_id=process.pid,
                exit_code=process.returncode,
            )

        output = stdout.decode(errors="replace")
        error_output = stderr.decode(errors="replace")
        success = process.returncode == 0

        log("debug", f"{log_prefix or command[0]} exited with status {process.returncode}")

        return ExecutionResult(
            success=success,
            output=output,
            error=None if success else error_output,
            process_id=process.pid,
            exit_code=process.returncode,
        )


async def execute_checked(executor: CommandExecutor,
                          command: List[str],
                          log_prefix: str,
                          env: Optional[Dict[str, str]] = None) -> ExecutionResult:
    """Run a command and raise ExecutionError unless it succeeded"""
    result = await executor.execute(command, log_prefix, False, env)
    if not result.success:
        raise ExecutionError(result.error or f"{log_prefix} failed", code=result.exit_code)
    return result
