# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from daytona_mcp._defaults import ClientDefaults
from daytona_mcp._files import FileController
from daytona_mcp._normalize import classify
from daytona_mcp._sandbox import SandboxLifecycleController
from daytona_mcp._session import SessionCommandController
from daytona_mcp._transport import HttpxTransport, Transport
from daytona_mcp._types import ToolResult
from daytona_mcp.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """A named operation: which controller method serves it and how it is described."""

    name: str
    controller: str
    method: str
    description: str


TOOLS: tuple[ToolSpec, ...] = (
    ToolSpec("listSandboxes", "sandboxes", "list_sandboxes",
             "List all sandboxes with optional filtering by labels"),
    ToolSpec("getSandbox", "sandboxes", "get_sandbox",
             "Get detailed information about a specific sandbox"),
    ToolSpec("createSandbox", "sandboxes", "create_sandbox",
             "Create a new sandbox with customizable parameters"),
    ToolSpec("deleteSandbox", "sandboxes", "delete_sandbox",
             "Delete a sandbox (force must be given explicitly)"),
    ToolSpec("startSandbox", "sandboxes", "start_sandbox", "Start a stopped sandbox"),
    ToolSpec("stopSandbox", "sandboxes", "stop_sandbox", "Stop a running sandbox"),
    ToolSpec("archiveSandbox", "sandboxes", "archive_sandbox", "Archive a stopped sandbox"),
    ToolSpec("setSandboxLabels", "sandboxes", "set_sandbox_labels",
             "Replace all labels of a sandbox"),
    ToolSpec("createSandboxBackup", "sandboxes", "create_sandbox_backup",
             "Create a backup of a sandbox"),
    ToolSpec("setAutoStopInterval", "sandboxes", "set_auto_stop_interval",
             "Configure auto-stop for a sandbox (0 disables it)"),
    ToolSpec("setAutoArchiveInterval", "sandboxes", "set_auto_archive_interval",
             "Configure auto-archive for a sandbox (0 uses the maximum interval)"),
    ToolSpec("getPortPreviewUrl", "sandboxes", "get_port_preview_url",
             "Get preview URL for a sandbox port"),
    ToolSpec("getSandboxBuildLogs", "sandboxes", "get_sandbox_build_logs",
             "Get build logs for a sandbox"),
    ToolSpec("executeCommand", "sessions", "execute_command",
             "Execute a command synchronously in a sandbox"),
    ToolSpec("listSessions", "sessions", "list_sessions",
             "List all active sessions in a sandbox"),
    ToolSpec("createSession", "sessions", "create_session", "Create a new session in a sandbox"),
    ToolSpec("getSession", "sessions", "get_session", "Get details about a specific session"),
    ToolSpec("deleteSession", "sessions", "delete_session", "Delete a specific session"),
    ToolSpec("executeSessionCommand", "sessions", "execute_session_command",
             "Execute a command in a specific session"),
    ToolSpec("getSessionCommand", "sessions", "get_session_command",
             "Get details about a specific command"),
    ToolSpec("getSessionCommandLogs", "sessions", "get_session_command_logs",
             "Get logs for a specific command in a session"),
    ToolSpec("getProjectDir", "files", "get_project_dir", "Get the project directory path"),
    ToolSpec("listFiles", "files", "list_files", "List files in a directory"),
    ToolSpec("downloadFile", "files", "download_file", "Download a file from a sandbox"),
    ToolSpec("deleteFile", "files", "delete_file", "Delete a file in a sandbox"),
)

TOOLS_BY_NAME: dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}


class Toolbox:
    """Entry point bundling the sandbox, session and file controllers.

    All controllers share one transport. Use as an async context manager
    to close the underlying HTTP client.

    Example:
        ```python
        async with Toolbox.from_env() as toolbox:
            result = await toolbox.invoke("executeCommand", {
                "sandbox_id": "sb-1",
                "command": "uname -a",
            })
            print(result.render())
        ```
    """

    def __init__(
        self,
        transport: Transport | None = None,
        *,
        defaults: ClientDefaults | None = None,
        api_key: str | None = None,
    ) -> None:
        self._defaults = defaults or ClientDefaults.from_env()
        self._transport = transport or HttpxTransport(self._defaults, api_key=api_key)
        self.sandboxes = SandboxLifecycleController(self._transport, self._defaults)
        self.sessions = SessionCommandController(self._transport, self._defaults)
        self.files = FileController(self._transport, self._defaults)

    @classmethod
    def from_env(
        cls,
        *,
        base_url: str | None = None,
        request_timeout_seconds: float | None = None,
        api_key: str | None = None,
    ) -> Toolbox:
        """Build a Toolbox from DAYTONA_* env vars with optional overrides."""
        defaults = ClientDefaults.from_env(
            base_url=base_url, request_timeout_seconds=request_timeout_seconds
        )
        return cls(defaults=defaults, api_key=api_key)

    def __repr__(self) -> str:
        return f"<Toolbox base_url={self._defaults.normalized_base_url!r} tools={len(TOOLS)}>"

    async def __aenter__(self) -> Toolbox:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    def operation(self, name: str) -> Callable[..., Awaitable[ToolResult]]:
        """Return the bound controller method serving a tool name.

        Raises:
            InvalidArgumentError: If no tool has that name
        """
        spec = TOOLS_BY_NAME.get(name)
        if spec is None:
            raise InvalidArgumentError(f"Unknown tool: {name}", argument="name")
        return getattr(getattr(self, spec.controller), spec.method)

    async def invoke(self, name: str, arguments: Mapping[str, Any] | None = None) -> ToolResult:
        """Invoke a tool by name with snake_case keyword arguments.

        Unknown tools and arguments that do not fit the operation's
        signature come back as local_invalid failures.
        """
        context = f"Failed to invoke {name}"
        try:
            operation = self.operation(name)
            bound = inspect.signature(operation).bind(**dict(arguments or {}))
        except InvalidArgumentError as e:
            return classify(e, context=context)
        except TypeError as e:
            return classify(InvalidArgumentError(str(e)), context=context)
        logger.debug("Invoking tool %s", name)
        return await operation(*bound.args, **bound.kwargs)
