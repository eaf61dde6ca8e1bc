# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""daytona-mcp CLI — run the MCP server or call tools from a terminal.

The functions in this package are intended to be called via the CLI,
not from Python code. No backwards compatibility guarantees are made
for Python calling patterns.
"""

from __future__ import annotations

import os
from typing import Any

try:
    import click
except ModuleNotFoundError as e:
    if getattr(e, "name", None) == "click":
        raise ImportError(
            "daytona-mcp CLI requires the 'cli' extra. Install it with: pip install daytona-mcp[cli]",
            name="click",
        ) from e
    raise

from daytona_mcp._env import load_env_file
from daytona_mcp.cli.call import call_tool
from daytona_mcp.cli.serve import run_server
from daytona_mcp.cli.tools import list_tools
from daytona_mcp.exceptions import DaytonaError
from daytona_mcp.server import LOG_LEVELS, configure_logging


class _DaytonaCLI(click.Group):
    """Click group with top-level DaytonaError handling.

    Errors raised outside an operation (bad env file, unknown tool name)
    are printed as clean "Error: <message>" output instead of tracebacks.
    """

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except DaytonaError as exc:
            raise click.ClickException(str(exc)) from None


@click.group(cls=_DaytonaCLI)
@click.version_option(package_name="daytona-mcp")
@click.option("--base-url", default=None, help="Daytona API URL (default: DAYTONA_BASE_URL or api.daytona.io).")
@click.option(
    "--env-file",
    default=None,
    type=click.Path(dir_okay=False),
    help="Load environment variables from a .env file first.",
)
@click.option(
    "--log-level",
    default=lambda: os.environ.get("LOG_LEVEL", "WARNING"),
    type=click.Choice(list(LOG_LEVELS), case_sensitive=False),
    help="Log level for stderr output.",
)
@click.pass_context
def cli(ctx: click.Context, base_url: str | None, env_file: str | None, log_level: str) -> None:
    """Daytona sandbox tools over MCP."""
    configure_logging(log_level)
    if env_file:
        try:
            load_env_file(env_file)
        except FileNotFoundError as exc:
            raise click.BadParameter(str(exc), param_hint="--env-file") from exc
    ctx.ensure_object(dict)
    ctx.obj["base_url"] = base_url


cli.add_command(run_server, "serve")
cli.add_command(list_tools, "tools")
cli.add_command(call_tool, "call")
