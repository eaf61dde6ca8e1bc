# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Environment variable utilities."""

from __future__ import annotations

import os


def load_env_file(filepath: str = ".env", *, override: bool = False) -> dict[str, str]:
    """Load variables from a .env file into os.environ.

    Args:
        filepath: Path to .env file (default: ".env")
        override: If True, values from the file replace existing env vars

    Returns:
        Dictionary of the variables that were read from the file

    Raises:
        FileNotFoundError: If the .env file doesn't exist

    Example:
        load_env_file(".env.local")
        toolbox = Toolbox.from_env()
    """
    from dotenv import dotenv_values

    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"Env file not found: {filepath}")

    values = {key: value for key, value in dotenv_values(filepath).items() if value is not None}
    for key, value in values.items():
        if override or key not in os.environ:
            os.environ[key] = value
    return values
