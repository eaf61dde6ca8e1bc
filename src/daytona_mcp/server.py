# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""MCP server exposing the toolbox operations as tools.

FastMCP derives each tool's argument schema from the function signature
and validates incoming arguments before the toolbox sees them. Every tool
returns the rendered envelope text: a title line, then the body.

Tool arguments keep the camelCase names MCP clients already send
(sandboxId, runAsync, organizationId, ...). FastMCP ignores keys it does
not know, so these names are the wire contract; the Python API under
them stays snake_case.

Annotations here are evaluated eagerly (no postponed evaluation) because
FastMCP builds the argument models from them at registration time.
"""

import logging
import sys
from typing import Annotated

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from daytona_mcp._toolbox import TOOLS_BY_NAME, Toolbox

logger = logging.getLogger(__name__)

SERVER_NAME = "daytona"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

SandboxId = Annotated[str, Field(description="ID of the sandbox")]
SessionId = Annotated[str, Field(description="The ID of the session")]
CommandId = Annotated[str, Field(description="The ID of the command")]
OrganizationId = Annotated[
    str | None,
    Field(description="Organization ID (optional, uses default from API key if not provided)"),
]
Follow = Annotated[bool | None, Field(description="Whether to follow the logs stream")]
Verbose = Annotated[bool | None, Field(description="Include verbose output")]


def _describe(name: str) -> str:
    return TOOLS_BY_NAME[name].description


def build_server(toolbox: Toolbox) -> FastMCP:
    """Create a FastMCP server whose tools call into the given toolbox."""
    server = FastMCP(SERVER_NAME)

    # sandbox management

    @server.tool(name="listSandboxes", description=_describe("listSandboxes"))
    async def list_sandboxes(
        verbose: Verbose = None,
        labels: Annotated[
            str | None,
            Field(description='JSON encoded labels to filter by, e.g. {"label1": "value1"}'),
        ] = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.list_sandboxes(
            verbose=verbose, labels=labels, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getSandbox", description=_describe("getSandbox"))
    async def get_sandbox(
        sandboxId: SandboxId, verbose: Verbose = None, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sandboxes.get_sandbox(
            sandboxId, verbose=verbose, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="createSandbox", description=_describe("createSandbox"))
    async def create_sandbox(
        snapshot: Annotated[str, Field(description="The ID or name of the snapshot used for the sandbox")],
        user: Annotated[str | None, Field(description="The user associated with the project")] = None,
        env: Annotated[
            dict[str, str] | None, Field(description="Environment variables for the sandbox")
        ] = None,
        labels: Annotated[dict[str, str] | None, Field(description="Labels for the sandbox")] = None,
        public: Annotated[
            bool | None, Field(description="Whether the sandbox http preview is publicly accessible")
        ] = None,
        cpu: Annotated[float | None, Field(ge=0, description="CPU cores allocated to the sandbox")] = None,
        gpu: Annotated[float | None, Field(ge=0, description="GPU units allocated to the sandbox")] = None,
        memory: Annotated[
            float | None, Field(ge=0, description="Memory allocated to the sandbox in GB")
        ] = None,
        disk: Annotated[
            float | None, Field(ge=0, description="Disk space allocated to the sandbox in GB")
        ] = None,
        autoStopInterval: Annotated[
            int | None, Field(ge=0, description="Auto-stop interval in minutes (0 means disabled)")
        ] = None,
        autoArchiveInterval: Annotated[
            int | None,
            Field(ge=0, description="Auto-archive interval in minutes (0 means the maximum interval will be used)"),
        ] = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.create_sandbox(
            snapshot,
            user=user,
            env=env,
            labels=labels,
            public=public,
            cpu=cpu,
            gpu=gpu,
            memory=memory,
            disk=disk,
            auto_stop_interval=autoStopInterval,
            auto_archive_interval=autoArchiveInterval,
            organization_id=organizationId,
        )
        return result.render()

    @server.tool(name="deleteSandbox", description=_describe("deleteSandbox"))
    async def delete_sandbox(
        sandboxId: SandboxId,
        force: Annotated[bool, Field(description="Force deletion")],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.delete_sandbox(
            sandboxId, force, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="startSandbox", description=_describe("startSandbox"))
    async def start_sandbox(sandboxId: SandboxId, organizationId: OrganizationId = None) -> str:
        result = await toolbox.sandboxes.start_sandbox(sandboxId, organization_id=organizationId)
        return result.render()

    @server.tool(name="stopSandbox", description=_describe("stopSandbox"))
    async def stop_sandbox(sandboxId: SandboxId, organizationId: OrganizationId = None) -> str:
        result = await toolbox.sandboxes.stop_sandbox(sandboxId, organization_id=organizationId)
        return result.render()

    @server.tool(name="archiveSandbox", description=_describe("archiveSandbox"))
    async def archive_sandbox(sandboxId: SandboxId, organizationId: OrganizationId = None) -> str:
        result = await toolbox.sandboxes.archive_sandbox(
            sandboxId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="setSandboxLabels", description=_describe("setSandboxLabels"))
    async def set_sandbox_labels(
        sandboxId: SandboxId,
        labels: Annotated[
            dict[str, str], Field(description="The complete label set; labels not listed are removed")
        ],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.set_sandbox_labels(
            sandboxId, labels, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="createSandboxBackup", description=_describe("createSandboxBackup"))
    async def create_sandbox_backup(
        sandboxId: SandboxId, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sandboxes.create_sandbox_backup(
            sandboxId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="setAutoStopInterval", description=_describe("setAutoStopInterval"))
    async def set_auto_stop_interval(
        sandboxId: SandboxId,
        interval: Annotated[int, Field(ge=0, description="Auto-stop interval in minutes (0 to disable)")],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.set_auto_stop_interval(
            sandboxId, interval, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="setAutoArchiveInterval", description=_describe("setAutoArchiveInterval"))
    async def set_auto_archive_interval(
        sandboxId: SandboxId,
        interval: Annotated[
            int,
            Field(ge=0, description="Auto-archive interval in minutes (0 means the maximum interval will be used)"),
        ],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.set_auto_archive_interval(
            sandboxId, interval, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getPortPreviewUrl", description=_describe("getPortPreviewUrl"))
    async def get_port_preview_url(
        sandboxId: SandboxId,
        port: Annotated[int, Field(description="Port number to get preview URL for")],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sandboxes.get_port_preview_url(
            sandboxId, port, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getSandboxBuildLogs", description=_describe("getSandboxBuildLogs"))
    async def get_sandbox_build_logs(
        sandboxId: SandboxId, follow: Follow = None, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sandboxes.get_sandbox_build_logs(
            sandboxId, follow=follow, organization_id=organizationId
        )
        return result.render()

    # commands and sessions

    @server.tool(name="executeCommand", description=_describe("executeCommand"))
    async def execute_command(
        sandboxId: SandboxId,
        command: Annotated[str, Field(description="The command to execute")],
        cwd: Annotated[str | None, Field(description="Current working directory")] = None,
        timeout: Annotated[
            int | None, Field(description="Timeout in seconds, defaults to 10 seconds")
        ] = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sessions.execute_command(
            sandboxId, command, cwd=cwd, timeout=timeout, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="listSessions", description=_describe("listSessions"))
    async def list_sessions(sandboxId: SandboxId, organizationId: OrganizationId = None) -> str:
        result = await toolbox.sessions.list_sessions(sandboxId, organization_id=organizationId)
        return result.render()

    @server.tool(name="createSession", description=_describe("createSession"))
    async def create_session(
        sandboxId: SandboxId, sessionId: SessionId, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sessions.create_session(
            sandboxId, sessionId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getSession", description=_describe("getSession"))
    async def get_session(
        sandboxId: SandboxId, sessionId: SessionId, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sessions.get_session(
            sandboxId, sessionId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="deleteSession", description=_describe("deleteSession"))
    async def delete_session(
        sandboxId: SandboxId, sessionId: SessionId, organizationId: OrganizationId = None
    ) -> str:
        result = await toolbox.sessions.delete_session(
            sandboxId, sessionId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="executeSessionCommand", description=_describe("executeSessionCommand"))
    async def execute_session_command(
        sandboxId: SandboxId,
        sessionId: SessionId,
        command: Annotated[str, Field(description="The command to execute")],
        runAsync: Annotated[
            bool | None, Field(description="Whether to execute the command asynchronously")
        ] = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sessions.execute_session_command(
            sandboxId, sessionId, command, run_async=runAsync, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getSessionCommand", description=_describe("getSessionCommand"))
    async def get_session_command(
        sandboxId: SandboxId,
        sessionId: SessionId,
        commandId: CommandId,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sessions.get_session_command(
            sandboxId, sessionId, commandId, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="getSessionCommandLogs", description=_describe("getSessionCommandLogs"))
    async def get_session_command_logs(
        sandboxId: SandboxId,
        sessionId: SessionId,
        commandId: CommandId,
        follow: Follow = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.sessions.get_session_command_logs(
            sandboxId, sessionId, commandId, follow=follow, organization_id=organizationId
        )
        return result.render()

    # files

    @server.tool(name="getProjectDir", description=_describe("getProjectDir"))
    async def get_project_dir(sandboxId: SandboxId, organizationId: OrganizationId = None) -> str:
        result = await toolbox.files.get_project_dir(sandboxId, organization_id=organizationId)
        return result.render()

    @server.tool(name="listFiles", description=_describe("listFiles"))
    async def list_files(
        sandboxId: SandboxId,
        path: Annotated[str | None, Field(description="Path to list files from")] = None,
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.files.list_files(
            sandboxId, path=path, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="downloadFile", description=_describe("downloadFile"))
    async def download_file(
        sandboxId: SandboxId,
        path: Annotated[str, Field(description="Path to the file")],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.files.download_file(
            sandboxId, path, organization_id=organizationId
        )
        return result.render()

    @server.tool(name="deleteFile", description=_describe("deleteFile"))
    async def delete_file(
        sandboxId: SandboxId,
        path: Annotated[str, Field(description="Path to the file")],
        organizationId: OrganizationId = None,
    ) -> str:
        result = await toolbox.files.delete_file(sandboxId, path, organization_id=organizationId)
        return result.render()

    logger.debug("Registered %d tools on MCP server %s", len(TOOLS_BY_NAME), SERVER_NAME)
    return server


def configure_logging(level: str) -> None:
    """Send log records to stderr; stdout carries the MCP protocol."""
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(level.upper())
        return
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        stream=sys.stderr,
    )


async def serve_stdio(toolbox: Toolbox) -> None:
    """Run the MCP server over stdio until the client disconnects."""
    async with toolbox:
        await build_server(toolbox).run_stdio_async()
