# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import logging
from typing import Any

from daytona_mcp._controller import BaseController
from daytona_mcp._normalize import command_success, success
from daytona_mcp._resolver import validate_identifier
from daytona_mcp._types import CommandResult, ToolResult, ToolSuccess
from daytona_mcp.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


def _require_command(command: Any) -> str:
    if not isinstance(command, str) or not command.strip():
        raise InvalidArgumentError("command cannot be empty", argument="command")
    return command


def _command_timeout(timeout: Any, default: int) -> int:
    if timeout is None:
        return default
    if isinstance(timeout, bool) or not isinstance(timeout, int | float):
        raise InvalidArgumentError(f"timeout must be a number, got: {timeout!r}", argument="timeout")
    if timeout <= 0:
        return default
    return int(timeout)


class SessionCommandController(BaseController):
    """Sessions and command execution inside a sandbox.

    Two execution modes are offered:
    - execute_command: one-shot, no session, blocks until the command exits
      or the remote timeout expires. The result always has an exit code and
      inline output.
    - execute_session_command: runs inside a caller-named session. With
      run_async=False it blocks like the one-shot mode; with run_async=True it
      returns a command ID right away and the caller polls
      get_session_command / get_session_command_logs.

    Nothing is polled or timed out here for asynchronous commands, and
    session existence is never checked locally: a vanished session surfaces
    as the remote's not-found answer.

    Example:
        ```python
        sessions = SessionCommandController(transport)
        await sessions.create_session("sb-1", "build")
        started = await sessions.execute_session_command("sb-1", "build", "make", run_async=True)
        status = await sessions.get_session_command("sb-1", "build", started.payload.command_id)
        if status.payload.running:
            ...
        ```
    """

    async def execute_command(
        self,
        sandbox_id: str,
        command: str,
        *,
        cwd: str | None = None,
        timeout: int | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Run a short command synchronously without a session.

        Args:
            sandbox_id: ID of the sandbox
            command: Shell command to run
            cwd: Working directory (default "/")
            timeout: Remote timeout in seconds (default 10)
            organization_id: Organization scope override
        """

        async def _execute() -> ToolSuccess:
            body = {
                "command": _require_command(command),
                "cwd": cwd or self._defaults.command_cwd,
                "timeout": _command_timeout(timeout, self._defaults.command_timeout_seconds),
            }
            data = await self._send(
                "executeCommand",
                {"sandbox_id": sandbox_id, "organization_id": organization_id},
                body=body,
            )
            result = CommandResult.from_payload(data)
            if result.exit_code is None:
                logger.warning("Synchronous execution in %s returned no exit code", sandbox_id)
            return command_success("Command Execution Result", result)

        return await self._run("Failed to execute command", _execute)

    async def list_sessions(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "listSessions",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            title=f"Sandbox {sandbox_id} Sessions",
            context=f"Failed to list sessions for sandbox {sandbox_id}",
        )

    async def create_session(
        self, sandbox_id: str, session_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        """Create a session with a caller-chosen ID.

        The ID is checked like a path identifier here, since every later
        call places it in a URL path.
        """

        async def _create() -> ToolSuccess:
            validate_identifier("session_id", session_id)
            data = await self._send(
                "createSession",
                {"sandbox_id": sandbox_id, "organization_id": organization_id},
                body={"sessionId": session_id},
            )
            return success(
                f"Session Created in Sandbox {sandbox_id}",
                data,
                fallback="Session created successfully",
            )

        return await self._run(f"Failed to create session in sandbox {sandbox_id}", _create)

    async def get_session(
        self, sandbox_id: str, session_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "getSession",
            {"sandbox_id": sandbox_id, "session_id": session_id, "organization_id": organization_id},
            title=f"Session {session_id} in Sandbox {sandbox_id}",
            context=f"Failed to get session {session_id} in sandbox {sandbox_id}",
        )

    async def delete_session(
        self, sandbox_id: str, session_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "deleteSession",
            {"sandbox_id": sandbox_id, "session_id": session_id, "organization_id": organization_id},
            title=f"Session {session_id} Deleted from Sandbox {sandbox_id}",
            context=f"Failed to delete session {session_id} in sandbox {sandbox_id}",
            fallback="Session deleted successfully",
        )

    async def execute_session_command(
        self,
        sandbox_id: str,
        session_id: str,
        command: str,
        *,
        run_async: bool | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Run a command inside an existing session.

        With run_async the result carries the command ID and no exit code.
        """

        async def _execute() -> ToolSuccess:
            body = {"command": _require_command(command), "runAsync": bool(run_async)}
            data = await self._send(
                "executeSessionCommand",
                {
                    "sandbox_id": sandbox_id,
                    "session_id": session_id,
                    "organization_id": organization_id,
                },
                body=body,
            )
            result = CommandResult.from_payload(data)
            if run_async and result.exit_code is not None:
                logger.debug("Async command %s already finished", result.command_id)
            return command_success(
                "Session Command Execution Result", result, include_id=True
            )

        return await self._run(f"Failed to execute command in session {session_id}", _execute)

    async def get_session_command(
        self,
        sandbox_id: str,
        session_id: str,
        command_id: str,
        *,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Look up a command. A missing exit code means it is still running."""

        async def _get() -> ToolSuccess:
            data = await self._send(
                "getSessionCommand",
                {
                    "sandbox_id": sandbox_id,
                    "session_id": session_id,
                    "command_id": command_id,
                    "organization_id": organization_id,
                },
            )
            result = CommandResult.from_payload(data)
            if result.command_id is None:
                result = CommandResult(command_id, result.exit_code, result.output)
            return success(
                f"Command {command_id} in Session {session_id}", data, payload=result
            )

        return await self._run(
            f"Failed to get command {command_id} in session {session_id}", _get
        )

    async def get_session_command_logs(
        self,
        sandbox_id: str,
        session_id: str,
        command_id: str,
        *,
        follow: bool | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Fetch accumulated command output in one request; follow is passed through."""
        return await self._call(
            "getSessionCommandLogs",
            {
                "sandbox_id": sandbox_id,
                "session_id": session_id,
                "command_id": command_id,
                "follow": follow,
                "organization_id": organization_id,
            },
            title=f"Command {command_id} Logs",
            context=f"Failed to get logs for command {command_id}",
            preformatted=True,
        )
