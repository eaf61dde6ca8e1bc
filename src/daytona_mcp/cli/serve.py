# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""daytona-mcp serve — run the MCP server over stdio."""

from __future__ import annotations

import asyncio
import logging

import click

from daytona_mcp import Toolbox
from daytona_mcp.server import serve_stdio

logger = logging.getLogger(__name__)


@click.command("serve")
@click.option(
    "--request-timeout",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Client-side HTTP timeout in seconds.",
)
@click.pass_context
def run_server(ctx: click.Context, request_timeout: float | None) -> None:
    """Serve the sandbox tools to an MCP client over stdio."""
    toolbox = Toolbox.from_env(
        base_url=(ctx.obj or {}).get("base_url"),
        request_timeout_seconds=request_timeout,
    )
    logger.info("Starting MCP server %r", toolbox)
    try:
        asyncio.run(serve_stdio(toolbox))
    except KeyboardInterrupt:
        pass
