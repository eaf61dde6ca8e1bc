# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Map operation names and validated arguments to concrete request targets.

This is the only place caller-supplied identifiers are placed into a URL
path, so every identifier is checked here before interpolation.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any
from urllib.parse import quote

from daytona_mcp._defaults import ORGANIZATION_HEADER
from daytona_mcp._types import RequestTarget
from daytona_mcp.exceptions import InvalidArgumentError, InvalidIdentifierError

_UNSAFE_IDENTIFIER_CHARS = frozenset("/\\?#%")
_IDENTIFIER_FIELDS = ("sandbox_id", "session_id", "command_id")
_INTEGER_FIELDS = ("port", "interval")

_SESSION = "/toolbox/{sandbox_id}/toolbox/process/session"
_COMMAND = _SESSION + "/{session_id}/command/{command_id}"


class _QueryMode(Enum):
    DEFAULT = "default"
    OPTIONAL = "optional"
    REQUIRED = "required"


@dataclass(frozen=True)
class _Query:
    name: str
    mode: _QueryMode
    default: Any = None


@dataclass(frozen=True)
class _Route:
    method: str
    template: str
    query: tuple[_Query, ...] = ()
    expects_text: bool = False


_VERBOSE = _Query("verbose", _QueryMode.DEFAULT, False)
_FOLLOW = _Query("follow", _QueryMode.DEFAULT, False)

ROUTES: dict[str, _Route] = {
    # sandbox lifecycle
    "listSandboxes": _Route(
        "GET", "/sandbox", (_VERBOSE, _Query("labels", _QueryMode.OPTIONAL))
    ),
    "getSandbox": _Route("GET", "/sandbox/{sandbox_id}", (_VERBOSE,)),
    "createSandbox": _Route("POST", "/sandbox"),
    "deleteSandbox": _Route(
        "DELETE", "/sandbox/{sandbox_id}", (_Query("force", _QueryMode.REQUIRED),)
    ),
    "startSandbox": _Route("POST", "/sandbox/{sandbox_id}/start"),
    "stopSandbox": _Route("POST", "/sandbox/{sandbox_id}/stop"),
    "archiveSandbox": _Route("POST", "/sandbox/{sandbox_id}/archive"),
    "setSandboxLabels": _Route("PUT", "/sandbox/{sandbox_id}/labels"),
    "createSandboxBackup": _Route("POST", "/sandbox/{sandbox_id}/backup"),
    "setAutoStopInterval": _Route("POST", "/sandbox/{sandbox_id}/autostop/{interval}"),
    "setAutoArchiveInterval": _Route("POST", "/sandbox/{sandbox_id}/autoarchive/{interval}"),
    "getPortPreviewUrl": _Route("GET", "/sandbox/{sandbox_id}/ports/{port}/preview-url"),
    "getSandboxBuildLogs": _Route(
        "GET", "/sandbox/{sandbox_id}/build-logs", (_FOLLOW,), expects_text=True
    ),
    # commands and sessions
    "executeCommand": _Route("POST", "/toolbox/{sandbox_id}/toolbox/process/execute"),
    "listSessions": _Route("GET", _SESSION),
    "createSession": _Route("POST", _SESSION),
    "getSession": _Route("GET", _SESSION + "/{session_id}"),
    "deleteSession": _Route("DELETE", _SESSION + "/{session_id}"),
    "executeSessionCommand": _Route("POST", _SESSION + "/{session_id}/exec"),
    "getSessionCommand": _Route("GET", _COMMAND),
    "getSessionCommandLogs": _Route("GET", _COMMAND + "/logs", (_FOLLOW,), expects_text=True),
    # files
    "getProjectDir": _Route("GET", "/toolbox/{sandbox_id}/toolbox/project-dir"),
    "listFiles": _Route(
        "GET", "/toolbox/{sandbox_id}/toolbox/files", (_Query("path", _QueryMode.OPTIONAL),)
    ),
    "downloadFile": _Route(
        "GET",
        "/toolbox/{sandbox_id}/toolbox/files/download",
        (_Query("path", _QueryMode.REQUIRED),),
        expects_text=True,
    ),
    "deleteFile": _Route(
        "DELETE", "/toolbox/{sandbox_id}/toolbox/files", (_Query("path", _QueryMode.REQUIRED),)
    ),
}


def validate_identifier(field: str, value: Any) -> str:
    """Check that an identifier can be placed into a URL path segment.

    Raises:
        InvalidIdentifierError: If the value is missing, empty, a dot segment,
            or contains a path separator, query/fragment delimiter, percent
            sign or control character
    """
    if not isinstance(value, str) or not value:
        raise InvalidIdentifierError(f"{field} is required", field=field, value=value)
    if value in (".", ".."):
        raise InvalidIdentifierError(
            f"{field} cannot be a relative path segment: {value!r}", field=field, value=value
        )
    for char in value:
        if char in _UNSAFE_IDENTIFIER_CHARS or ord(char) < 0x20 or ord(char) == 0x7F:
            raise InvalidIdentifierError(
                f"{field} contains an invalid character: {value!r}", field=field, value=value
            )
    return value


def _validate_integer(field: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be an integer, got: {value!r}", argument=field)
    return value


def _format_query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def organization_headers(organization_id: str | None) -> dict[str, str]:
    """Scope header for the request, or nothing when no organization is given.

    Raises:
        InvalidArgumentError: If the value cannot be sent as a header, i.e.
            it is not a string or holds non-ASCII or control characters
    """
    if not organization_id:
        return {}
    if not isinstance(organization_id, str) or not all(
        0x20 <= ord(char) < 0x7F for char in organization_id
    ):
        raise InvalidArgumentError(
            f"organization_id is not a valid header value: {organization_id!r}",
            argument="organization_id",
        )
    return {ORGANIZATION_HEADER: organization_id}


def resolve(operation: str, args: Mapping[str, Any], *, body: Any = None) -> RequestTarget:
    """Resolve an operation and its arguments to a request target.

    Args:
        operation: Tool name, e.g. "getSandbox"
        args: Validated arguments keyed by snake_case name
        body: JSON body to send, if the operation has one

    Returns:
        RequestTarget with interpolated path, query parameters and headers

    Raises:
        InvalidIdentifierError: If an identifier fails the path-safety check
        InvalidArgumentError: If the operation is unknown or a required
            query argument is missing
    """
    route = ROUTES.get(operation)
    if route is None:
        raise InvalidArgumentError(f"Unknown operation: {operation}")

    segments: dict[str, str] = {}
    for field in _IDENTIFIER_FIELDS:
        if "{" + field + "}" in route.template:
            segments[field] = quote(validate_identifier(field, args.get(field)), safe="")
    for field in _INTEGER_FIELDS:
        if "{" + field + "}" in route.template:
            segments[field] = str(_validate_integer(field, args.get(field)))
    path = route.template.format(**segments)

    query: dict[str, str] = {}
    for param in route.query:
        value = args.get(param.name)
        if value is None or value == "":
            if param.mode is _QueryMode.REQUIRED:
                raise InvalidArgumentError(
                    f"{param.name} is required for {operation}", argument=param.name
                )
            if param.mode is _QueryMode.OPTIONAL:
                continue
            value = param.default
        query[param.name] = _format_query_value(value)

    return RequestTarget(
        method=route.method,
        path=path,
        query=query,
        headers=organization_headers(args.get("organization_id")),
        body=body,
        expects_text=route.expects_text,
    )
