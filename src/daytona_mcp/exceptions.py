# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Exception hierarchy for sandbox tool operations.

Every exception carries the ErrorKind it is classified as, so the
normalizer can turn it into a failure envelope without inspecting types.
"""

from __future__ import annotations

from typing import Any

from daytona_mcp._types import ErrorKind


class DaytonaError(Exception):
    """Base exception for all daytona-mcp errors."""

    kind: ErrorKind = ErrorKind.UNKNOWN


class LocalInvalidError(DaytonaError):
    """Raised when a request cannot be constructed from the given arguments."""

    kind = ErrorKind.LOCAL_INVALID


class InvalidIdentifierError(LocalInvalidError):
    """Raised when a resource identifier is unsafe to place in a URL path."""

    def __init__(self, message: str, *, field: str, value: Any = None) -> None:
        super().__init__(message)
        self.field = field
        self.value = value


class InvalidArgumentError(LocalInvalidError):
    """Raised when arguments are missing or logically inconsistent."""

    def __init__(self, message: str, *, argument: str | None = None) -> None:
        super().__init__(message)
        self.argument = argument


class RemoteRejectedError(DaytonaError):
    """Raised when the remote service answered with a failure status.

    Access the HTTP status via status_code and the remote-supplied
    message (if any) via detail.
    """

    kind = ErrorKind.REMOTE_REJECTED

    def __init__(self, message: str, *, status_code: int, detail: str | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


class NotFoundError(RemoteRejectedError):
    """Raised when the remote reports the sandbox, session or command as absent."""


class DaytonaAuthenticationError(RemoteRejectedError):
    """Raised when the remote rejects the credential or organization scope."""


class UnreachableError(DaytonaError):
    """Raised when a request was sent but no response arrived."""

    kind = ErrorKind.UNREACHABLE
