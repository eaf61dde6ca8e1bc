# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from daytona_mcp._controller import BaseController
from daytona_mcp._normalize import success
from daytona_mcp._types import (
    AutoArchivePolicy,
    AutoStopPolicy,
    SandboxResources,
    SandboxState,
    ToolResult,
    ToolSuccess,
)
from daytona_mcp.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


def parse_label_filter(labels: str | Mapping[str, str] | None) -> dict[str, str] | None:
    """Decode a label filter given as JSON text or as a mapping.

    Raises:
        InvalidArgumentError: If the JSON is malformed or is not an object
            of string keys to string values
    """
    if labels is None or labels == "":
        return None
    if isinstance(labels, str):
        try:
            decoded = json.loads(labels)
        except json.JSONDecodeError as e:
            raise InvalidArgumentError(
                f"labels must be a JSON object, could not decode: {e.msg}", argument="labels"
            ) from e
    else:
        decoded = labels
    if not isinstance(decoded, Mapping):
        raise InvalidArgumentError("labels must be a JSON object", argument="labels")
    for key, value in decoded.items():
        if not isinstance(key, str) or not isinstance(value, str):
            raise InvalidArgumentError(
                f"labels must map strings to strings, got {key!r}: {value!r}", argument="labels"
            )
    return dict(decoded)


def matches_labels(record: Any, label_filter: Mapping[str, str]) -> bool:
    """Return True if the record's labels contain every filter key with the same value."""
    if not isinstance(record, Mapping):
        return False
    labels = record.get("labels")
    if not isinstance(labels, Mapping):
        return not label_filter
    return all(labels.get(key) == value for key, value in label_filter.items())


def _filter_collection(data: Any, label_filter: Mapping[str, str]) -> Any:
    if isinstance(data, list):
        return [record for record in data if matches_labels(record, label_filter)]
    if isinstance(data, Mapping) and isinstance(data.get("items"), list):
        filtered = dict(data)
        filtered["items"] = _filter_collection(data["items"], label_filter)
        return filtered
    return data


def _interval_minutes(interval: Any) -> int:
    if isinstance(interval, bool) or not isinstance(interval, int):
        raise InvalidArgumentError(
            f"interval must be a whole number of minutes, got: {interval!r}", argument="interval"
        )
    if interval < 0:
        raise InvalidArgumentError(
            f"interval cannot be negative, got: {interval}", argument="interval"
        )
    return interval


def _state_of(record: Any) -> SandboxState | None:
    if isinstance(record, Mapping) and "state" in record:
        return SandboxState.from_remote(record["state"])
    return None


class SandboxLifecycleController(BaseController):
    """Sandbox lifecycle operations.

    State transitions (start, stop, archive, delete) are forwarded as-is;
    the remote owns the state machine and its idempotency answers.

    Example:
        ```python
        sandboxes = SandboxLifecycleController(transport)
        created = await sandboxes.create_sandbox("python:3.12", cpu=2, labels={"team": "ml"})
        await sandboxes.set_auto_stop_interval(created.payload["id"], 0)  # disable auto-stop
        ```
    """

    async def list_sandboxes(
        self,
        *,
        verbose: bool | None = None,
        labels: str | Mapping[str, str] | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """List sandboxes, keeping only those whose labels contain every filter label."""

        async def _list() -> ToolSuccess:
            label_filter = parse_label_filter(labels)
            args: dict[str, Any] = {"verbose": verbose, "organization_id": organization_id}
            if label_filter:
                args["labels"] = json.dumps(label_filter, sort_keys=True)
            data = await self._send("listSandboxes", args)
            if label_filter:
                logger.debug("Applying label filter keys=%s", sorted(label_filter))
                data = _filter_collection(data, label_filter)
            return success("Sandboxes", data)

        return await self._run("Failed to list sandboxes", _list)

    async def get_sandbox(
        self,
        sandbox_id: str,
        *,
        verbose: bool | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        async def _get() -> ToolSuccess:
            data = await self._send(
                "getSandbox",
                {"sandbox_id": sandbox_id, "verbose": verbose, "organization_id": organization_id},
            )
            return success(f"Sandbox: {sandbox_id}", data, state=_state_of(data))

        return await self._run(f"Failed to get sandbox {sandbox_id}", _get)

    async def create_sandbox(
        self,
        snapshot: str,
        *,
        user: str | None = None,
        env: Mapping[str, str] | None = None,
        labels: Mapping[str, str] | None = None,
        public: bool | None = None,
        cpu: float | None = None,
        gpu: float | None = None,
        memory: float | None = None,
        disk: float | None = None,
        auto_stop_interval: int | None = None,
        auto_archive_interval: int | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Create a sandbox. Only the fields given are sent.

        Args:
            snapshot: ID or name of the snapshot to build the sandbox from
            user: User associated with the sandbox
            env: Environment variables for the sandbox
            labels: Labels for the sandbox
            public: Whether the HTTP preview is publicly accessible
            cpu: CPU cores
            gpu: GPU units
            memory: Memory in GB
            disk: Disk in GB
            auto_stop_interval: Minutes before auto-stop (0 disables)
            auto_archive_interval: Minutes before auto-archive (0 uses the maximum)
            organization_id: Organization scope override
        """

        async def _create() -> ToolSuccess:
            if not isinstance(snapshot, str) or not snapshot:
                raise InvalidArgumentError("snapshot is required", argument="snapshot")
            resources = SandboxResources(cpu=cpu, memory=memory, disk=disk, gpu=gpu)
            negative = resources.negative_fields()
            if negative:
                raise InvalidArgumentError(
                    f"Resource values cannot be negative: {', '.join(negative)}",
                    argument=negative[0],
                )
            optional: dict[str, Any] = {
                "user": user,
                "env": dict(env) if env is not None else None,
                "labels": dict(labels) if labels is not None else None,
                "public": public,
                "autoStopInterval": (
                    AutoStopPolicy(_interval_minutes(auto_stop_interval)).minutes
                    if auto_stop_interval is not None
                    else None
                ),
                "autoArchiveInterval": (
                    AutoArchivePolicy(_interval_minutes(auto_archive_interval)).minutes
                    if auto_archive_interval is not None
                    else None
                ),
            }
            body: dict[str, Any] = {"snapshot": snapshot, **resources.as_dict()}
            body.update({key: value for key, value in optional.items() if value is not None})
            data = await self._send("createSandbox", {"organization_id": organization_id}, body=body)
            return success("Sandbox Created", data, state=_state_of(data))

        return await self._run("Failed to create sandbox", _create)

    async def delete_sandbox(
        self,
        sandbox_id: str,
        force: bool | None,
        *,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Delete a sandbox. force has no default and must be given explicitly."""
        return await self._call(
            "deleteSandbox",
            {"sandbox_id": sandbox_id, "force": force, "organization_id": organization_id},
            title=f"Sandbox {sandbox_id} Deleted",
            context=f"Failed to delete sandbox {sandbox_id}",
            fallback="Sandbox has been deleted",
        )

    async def start_sandbox(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "startSandbox",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            body={},
            title=f"Sandbox {sandbox_id} Started",
            context=f"Failed to start sandbox {sandbox_id}",
            fallback="Sandbox has been started",
        )

    async def stop_sandbox(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "stopSandbox",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            body={},
            title=f"Sandbox {sandbox_id} Stopped",
            context=f"Failed to stop sandbox {sandbox_id}",
            fallback="Sandbox has been stopped",
        )

    async def archive_sandbox(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "archiveSandbox",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            body={},
            title=f"Sandbox {sandbox_id} Archived",
            context=f"Failed to archive sandbox {sandbox_id}",
            fallback="Sandbox has been archived",
        )

    async def set_sandbox_labels(
        self,
        sandbox_id: str,
        labels: Mapping[str, str],
        *,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Replace the sandbox's whole label set. Labels not resent are dropped."""

        async def _replace() -> ToolSuccess:
            if not isinstance(labels, Mapping):
                raise InvalidArgumentError("labels must be a mapping", argument="labels")
            data = await self._send(
                "setSandboxLabels",
                {"sandbox_id": sandbox_id, "organization_id": organization_id},
                body={"labels": dict(labels)},
            )
            return success(f"Sandbox {sandbox_id} Labels Updated", data)

        return await self._run(f"Failed to set labels for sandbox {sandbox_id}", _replace)

    async def create_sandbox_backup(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        """Trigger a backup. The result acknowledges the job, not its completion."""
        return await self._call(
            "createSandboxBackup",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            body={},
            title=f"Sandbox {sandbox_id} Backup Created",
            context=f"Failed to create backup for sandbox {sandbox_id}",
            fallback="Backup has been requested",
        )

    async def set_auto_stop_interval(
        self, sandbox_id: str, interval: int, *, organization_id: str | None = None
    ) -> ToolResult:
        """Set the auto-stop interval in minutes. 0 disables auto-stop."""

        async def _set() -> ToolSuccess:
            policy = AutoStopPolicy(_interval_minutes(interval))
            data = await self._send(
                "setAutoStopInterval",
                {
                    "sandbox_id": sandbox_id,
                    "interval": policy.minutes,
                    "organization_id": organization_id,
                },
                body={},
            )
            return success(
                f"Sandbox {sandbox_id} Auto-stop Interval Set",
                data,
                fallback=policy.describe(),
                payload=policy,
            )

        return await self._run(
            f"Failed to set auto-stop interval for sandbox {sandbox_id}", _set
        )

    async def set_auto_archive_interval(
        self, sandbox_id: str, interval: int, *, organization_id: str | None = None
    ) -> ToolResult:
        """Set the auto-archive interval in minutes. 0 selects the maximum interval."""

        async def _set() -> ToolSuccess:
            policy = AutoArchivePolicy(_interval_minutes(interval))
            data = await self._send(
                "setAutoArchiveInterval",
                {
                    "sandbox_id": sandbox_id,
                    "interval": policy.minutes,
                    "organization_id": organization_id,
                },
                body={},
            )
            return success(
                f"Sandbox {sandbox_id} Auto-archive Interval Set",
                data,
                fallback=policy.describe(),
                payload=policy,
            )

        return await self._run(
            f"Failed to set auto-archive interval for sandbox {sandbox_id}", _set
        )

    async def get_port_preview_url(
        self, sandbox_id: str, port: int, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "getPortPreviewUrl",
            {"sandbox_id": sandbox_id, "port": port, "organization_id": organization_id},
            title=f"Sandbox {sandbox_id} Port {port} Preview URL",
            context=f"Failed to get preview URL for sandbox {sandbox_id} port {port}",
        )

    async def get_sandbox_build_logs(
        self,
        sandbox_id: str,
        *,
        follow: bool | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        """Fetch build logs in a single request. follow is passed to the remote."""
        return await self._call(
            "getSandboxBuildLogs",
            {"sandbox_id": sandbox_id, "follow": follow, "organization_id": organization_id},
            title=f"Sandbox {sandbox_id} Build Logs",
            context=f"Failed to get build logs for sandbox {sandbox_id}",
            preformatted=True,
        )
