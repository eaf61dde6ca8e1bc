# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Console entry points.

``daytona-mcp`` (and ``python -m daytona_mcp``) is the click CLI from the
``cli`` extra. ``daytona-mcp-server`` only serves the tools over stdio and
needs nothing beyond the core install, which is what MCP hosts launch.
"""

from __future__ import annotations

import asyncio
import os
import sys

_MISSING_CLI_HINT = (
    "daytona-mcp CLI requires the 'cli' extra.\n"
    "Install it with: pip install daytona-mcp[cli]\n"
    "To only serve the tools over stdio, run: daytona-mcp-server"
)


def main() -> None:
    """Run the daytona-mcp CLI, or print an install hint without click."""
    try:
        from daytona_mcp.cli import cli
    except ImportError as e:
        if getattr(e, "name", None) in ("daytona_mcp.cli", "click"):
            print(_MISSING_CLI_HINT, file=sys.stderr)
            sys.exit(1)
        raise
    cli()


def serve() -> None:
    """Serve the tools over stdio, configured from DAYTONA_* and LOG_LEVEL."""
    from daytona_mcp import Toolbox
    from daytona_mcp.server import LOG_LEVELS, configure_logging, serve_stdio

    level = os.environ.get("LOG_LEVEL", "WARNING").upper()
    configure_logging(level if level in LOG_LEVELS else "WARNING")
    try:
        asyncio.run(serve_stdio(Toolbox.from_env()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
