# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""File operations inside a sandbox.

File paths travel as the ``path`` query parameter and are never placed in
the URL path, so they may contain slashes.
"""

from __future__ import annotations

from daytona_mcp._controller import BaseController
from daytona_mcp._types import ToolResult


class FileController(BaseController):
    async def get_project_dir(
        self, sandbox_id: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "getProjectDir",
            {"sandbox_id": sandbox_id, "organization_id": organization_id},
            title=f"Project Directory for Sandbox {sandbox_id}",
            context=f"Failed to get project directory for sandbox {sandbox_id}",
        )

    async def list_files(
        self,
        sandbox_id: str,
        *,
        path: str | None = None,
        organization_id: str | None = None,
    ) -> ToolResult:
        shown = path or "/"
        return await self._call(
            "listFiles",
            {"sandbox_id": sandbox_id, "path": path, "organization_id": organization_id},
            title=f"Files in {shown} for Sandbox {sandbox_id}",
            context=f"Failed to list files in {shown}",
        )

    async def download_file(
        self, sandbox_id: str, path: str, *, organization_id: str | None = None
    ) -> ToolResult:
        """Return the file's content as a preformatted text block."""
        return await self._call(
            "downloadFile",
            {"sandbox_id": sandbox_id, "path": path, "organization_id": organization_id},
            title=f"File Content: {path}",
            context=f"Failed to download file {path}",
            preformatted=True,
        )

    async def delete_file(
        self, sandbox_id: str, path: str, *, organization_id: str | None = None
    ) -> ToolResult:
        return await self._call(
            "deleteFile",
            {"sandbox_id": sandbox_id, "path": path, "organization_id": organization_id},
            title=f"File Deleted: {path}",
            context=f"Failed to delete file {path}",
            fallback="File deleted successfully",
        )
