# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Authentication resolution for the Daytona API.

The API key comes from DAYTONA_API_KEY and is sent as
Authorization: Bearer. When no key is configured, requests go out
without credentials and the remote answers 401.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Literal

from daytona_mcp._defaults import API_KEY_ENV_VAR

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthHeaders:
    """Resolved authentication headers and strategy used."""

    headers: dict[str, str]
    strategy: Literal["api_key", "none"]

    def __bool__(self) -> bool:
        """Return True if any auth headers are present."""
        return bool(self.headers)


def resolve_auth(api_key: str | None = None) -> AuthHeaders:
    """Resolve authentication headers.

    Resolution order:
    1. Explicit api_key argument
    2. DAYTONA_API_KEY env var
    3. No auth (empty headers)

    Returns:
        AuthHeaders with resolved headers and strategy name
    """
    key = api_key or os.environ.get(API_KEY_ENV_VAR)
    if not key:
        logger.debug("No authentication credentials found")
        return AuthHeaders(headers={}, strategy="none")

    logger.debug("Using api_key authentication")
    return AuthHeaders(
        headers={"Authorization": f"Bearer {key}"},
        strategy="api_key",
    )
