# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

logger = logging.getLogger(__name__)


class ErrorKind(StrEnum):
    """Classified failure kinds. Exhaustive and mutually exclusive."""

    REMOTE_REJECTED = "remote_rejected"
    UNREACHABLE = "unreachable"
    LOCAL_INVALID = "local_invalid"
    UNKNOWN = "unknown"


class SandboxState(StrEnum):
    """Sandbox lifecycle states as reported by the remote service."""

    CREATING = "creating"
    STARTED = "started"
    STOPPED = "stopped"
    ARCHIVED = "archived"
    DELETING = "deleting"
    ERROR = "error"
    UNKNOWN = "unknown"

    @classmethod
    def from_remote(cls, value: Any) -> SandboxState:
        """Convert a remote state string, tolerating values added later."""
        try:
            return cls(str(value).lower())
        except ValueError:
            logger.warning("Unknown sandbox state %r, treating as UNKNOWN", value)
            return cls.UNKNOWN


@dataclass(frozen=True)
class SandboxResources:
    """Resource allocation for a new sandbox. Omitted fields are not sent."""

    cpu: float | None = None
    memory: float | None = None
    disk: float | None = None
    gpu: float | None = None

    def negative_fields(self) -> list[str]:
        return [name for name, value in self.as_dict().items() if value < 0]

    def as_dict(self) -> dict[str, float]:
        values = {"cpu": self.cpu, "memory": self.memory, "disk": self.disk, "gpu": self.gpu}
        return {name: value for name, value in values.items() if value is not None}


@dataclass(frozen=True)
class AutoStopPolicy:
    """Auto-stop interval in minutes. Zero disables auto-stop."""

    minutes: int

    @property
    def disabled(self) -> bool:
        return self.minutes == 0

    def describe(self) -> str:
        if self.disabled:
            return "Auto-stop disabled"
        return f"Auto-stop interval set to {self.minutes} minute(s)"


@dataclass(frozen=True)
class AutoArchivePolicy:
    """Auto-archive interval in minutes. Zero selects the maximum interval."""

    minutes: int

    @property
    def uses_maximum(self) -> bool:
        return self.minutes == 0

    def describe(self) -> str:
        if self.uses_maximum:
            return "Auto-archive set to the maximum interval"
        return f"Auto-archive interval set to {self.minutes} minute(s)"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a command execution or a command status lookup.

    Attributes:
        command_id: Remote identifier, present for session-scoped commands
        exit_code: Exit code, None while the command is still running
        output: Inline output, when the remote returned it
    """

    command_id: str | None = None
    exit_code: int | None = None
    output: str | None = None

    @property
    def running(self) -> bool:
        return self.exit_code is None

    @classmethod
    def from_payload(cls, payload: Any) -> CommandResult:
        if not isinstance(payload, Mapping):
            return cls(output=None if payload is None else str(payload))
        command_id = payload.get("cmdId") or payload.get("id")
        exit_code = payload.get("exitCode")
        output = payload.get("output")
        if output is None:
            output = payload.get("result")
        return cls(
            command_id=str(command_id) if command_id is not None else None,
            exit_code=int(exit_code) if exit_code is not None else None,
            output=output,
        )


@dataclass(frozen=True)
class RequestTarget:
    """A fully resolved outbound request."""

    method: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    expects_text: bool = False


@dataclass(frozen=True)
class RawResponse:
    """Status and body exactly as received from the remote service.

    body is the decoded JSON value when the response was JSON, otherwise
    the response text.
    """

    status_code: int
    body: Any = None
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


@dataclass(frozen=True)
class PlainText:
    """Result body that is already text (logs, file content, messages)."""

    text: str
    preformatted: bool = False

    def render(self) -> str:
        if self.preformatted:
            return f"```\n{self.text}\n```"
        return self.text


@dataclass(frozen=True)
class RenderedRecord:
    """Result body that is a structured value, dumped deterministically."""

    value: Any

    def render(self) -> str:
        return json.dumps(self.value, indent=2, default=str)


ResultContent: TypeAlias = PlainText | RenderedRecord


@dataclass(frozen=True)
class ToolSuccess:
    """Success envelope: a title plus one body region.

    state is set when the result describes a single sandbox record.
    """

    title: str
    content: ResultContent
    payload: Any = None
    state: SandboxState | None = None

    @property
    def ok(self) -> bool:
        return True

    def render(self) -> str:
        return f"## {self.title}\n\n{self.content.render()}"


@dataclass(frozen=True)
class ToolFailure:
    """Failure envelope: a classified kind and a message."""

    kind: ErrorKind
    message: str
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return False

    @property
    def not_found(self) -> bool:
        return self.kind == ErrorKind.REMOTE_REJECTED and self.status_code == 404

    def render(self) -> str:
        return f"## Error\n\n{self.message}"


ToolResult: TypeAlias = ToolSuccess | ToolFailure
