# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Any

DEFAULT_BASE_URL: str = "https://api.daytona.io"
BASE_URL_ENV_VAR: str = "DAYTONA_BASE_URL"
API_KEY_ENV_VAR: str = "DAYTONA_API_KEY"
ORGANIZATION_HEADER: str = "X-Daytona-Organization-ID"

# Default timeout for HTTP requests (seconds)
# This is the client-side wait, not the remote command timeout.
DEFAULT_REQUEST_TIMEOUT_SECONDS: float = 300.0

# Remote-side timeout for one-shot synchronous command execution (seconds)
DEFAULT_COMMAND_TIMEOUT_SECONDS: int = 10

# Working directory for one-shot execution when the caller gives none
DEFAULT_COMMAND_CWD: str = "/"


@dataclass(frozen=True)
class ClientDefaults:
    """Immutable configuration for the transport and controllers.

    There are two separate timeout concepts:
    - request_timeout_seconds: How long the HTTP client waits for a response
    - command_timeout_seconds: How long the remote lets a synchronous
      one-shot command run before giving up

    Example:
        ```python
        defaults = ClientDefaults(
            base_url="https://api.daytona.io",
            request_timeout_seconds=60,
            command_timeout_seconds=30,
        )
        ```
    """

    base_url: str = DEFAULT_BASE_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    command_timeout_seconds: int = DEFAULT_COMMAND_TIMEOUT_SECONDS
    command_cwd: str = DEFAULT_COMMAND_CWD

    @classmethod
    def from_env(cls, **overrides: Any) -> ClientDefaults:
        """Build defaults, taking the base URL from DAYTONA_BASE_URL when set."""
        defaults = cls()
        env_base_url = os.environ.get(BASE_URL_ENV_VAR)
        if env_base_url:
            defaults = defaults.with_overrides(base_url=env_base_url)
        overrides = {key: value for key, value in overrides.items() if value is not None}
        return defaults.with_overrides(**overrides)

    @property
    def normalized_base_url(self) -> str:
        return self.base_url.rstrip("/")

    def with_overrides(self, **kwargs: Any) -> ClientDefaults:
        """Create new defaults with some values overridden."""
        return replace(self, **kwargs)
