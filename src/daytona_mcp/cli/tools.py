# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""daytona-mcp tools — list available tools."""

from __future__ import annotations

import json

import click

from daytona_mcp._toolbox import TOOLS


@click.command("tools")
@click.option(
    "--output",
    "-o",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"], case_sensitive=False),
    help="Output format.",
)
def list_tools(output_format: str) -> None:
    """List the tools served by this package."""
    if output_format == "json":
        data = [{"name": spec.name, "description": spec.description} for spec in TOOLS]
        click.echo(json.dumps(data, indent=2))
        return

    width = max(len(spec.name) for spec in TOOLS)
    click.echo(f"{'TOOL':<{width}}  DESCRIPTION")
    click.echo(f"{'-' * width}  {'-' * 11}")
    for spec in TOOLS:
        click.echo(f"{spec.name:<{width}}  {spec.description}")
