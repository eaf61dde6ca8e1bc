# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Daytona sandbox operations exposed as MCP tools."""

from daytona_mcp._auth import AuthHeaders, resolve_auth
from daytona_mcp._defaults import ClientDefaults
from daytona_mcp._files import FileController
from daytona_mcp._sandbox import SandboxLifecycleController
from daytona_mcp._session import SessionCommandController
from daytona_mcp._toolbox import TOOLS, Toolbox, ToolSpec
from daytona_mcp._transport import HttpxTransport, Transport
from daytona_mcp._types import (
    AutoArchivePolicy,
    AutoStopPolicy,
    CommandResult,
    ErrorKind,
    PlainText,
    RenderedRecord,
    SandboxResources,
    SandboxState,
    ToolFailure,
    ToolResult,
    ToolSuccess,
)
from daytona_mcp.exceptions import (
    DaytonaAuthenticationError,
    DaytonaError,
    InvalidArgumentError,
    InvalidIdentifierError,
    LocalInvalidError,
    NotFoundError,
    RemoteRejectedError,
    UnreachableError,
)

__all__ = [
    "TOOLS",
    "AuthHeaders",
    "AutoArchivePolicy",
    "AutoStopPolicy",
    "ClientDefaults",
    "CommandResult",
    "DaytonaAuthenticationError",
    "DaytonaError",
    "ErrorKind",
    "FileController",
    "HttpxTransport",
    "InvalidArgumentError",
    "InvalidIdentifierError",
    "LocalInvalidError",
    "NotFoundError",
    "PlainText",
    "RemoteRejectedError",
    "RenderedRecord",
    "SandboxLifecycleController",
    "SandboxResources",
    "SandboxState",
    "SessionCommandController",
    "ToolFailure",
    "ToolResult",
    "ToolSpec",
    "ToolSuccess",
    "Toolbox",
    "Transport",
    "UnreachableError",
    "resolve_auth",
]
