# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Integration test configuration."""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load .env from project root, but don't override existing env vars
_project_root = Path(__file__).parent.parent.parent
load_dotenv(_project_root / ".env", override=False)


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Skip live tests when no API key is configured."""
    if os.environ.get("DAYTONA_API_KEY"):
        return
    skip = pytest.mark.skip(reason="DAYTONA_API_KEY env var required for integration tests")
    for item in items:
        if "integration" in item.keywords:
            item.add_marker(skip)
