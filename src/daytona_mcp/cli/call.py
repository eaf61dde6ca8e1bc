# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""daytona-mcp call — invoke one tool and print its result."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import click

from daytona_mcp import Toolbox, ToolFailure, ToolResult


async def _invoke(base_url: str | None, name: str, arguments: dict[str, Any]) -> ToolResult:
    async with Toolbox.from_env(base_url=base_url) as toolbox:
        return await toolbox.invoke(name, arguments)


def _as_json(result: ToolResult) -> dict[str, Any]:
    if isinstance(result, ToolFailure):
        return {
            "ok": False,
            "kind": result.kind.value,
            "message": result.message,
            "status_code": result.status_code,
        }
    return {"ok": True, "title": result.title, "body": result.content.render()}


@click.command("call")
@click.argument("name")
@click.option(
    "--args",
    "-a",
    "raw_arguments",
    default="{}",
    help='Tool arguments as a JSON object keyed by snake_case name, e.g. \'{"sandbox_id": "abc"}\'.',
)
@click.option(
    "--output",
    "-o",
    "output_format",
    default="text",
    type=click.Choice(["text", "json"], case_sensitive=False),
    help="Output format.",
)
@click.pass_context
def call_tool(ctx: click.Context, name: str, raw_arguments: str, output_format: str) -> None:
    """Invoke a tool by NAME.

    Exits with status 1 when the tool returns a failure.

    Examples:

        daytona-mcp call listSandboxes --args '{"labels": "{\\"team\\": \\"ml\\"}"}'

        daytona-mcp call executeCommand --args '{"sandbox_id": "abc", "command": "ls"}'
    """
    try:
        arguments = json.loads(raw_arguments)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc.msg}", param_hint="--args") from exc
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    base_url = (ctx.obj or {}).get("base_url")
    result = asyncio.run(_invoke(base_url, name, arguments))

    if output_format == "json":
        click.echo(json.dumps(_as_json(result), indent=2))
    else:
        click.echo(result.render())

    if not result.ok:
        ctx.exit(1)
