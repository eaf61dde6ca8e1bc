# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Tests for daytona_mcp._auth module."""

from __future__ import annotations

from daytona_mcp import resolve_auth


class TestResolveAuth:
    def test_no_credentials(self) -> None:
        auth = resolve_auth()
        assert auth.strategy == "none"
        assert auth.headers == {}
        assert not auth

    def test_env_api_key(self, mock_api_key: str) -> None:
        auth = resolve_auth()
        assert auth.strategy == "api_key"
        assert auth.headers == {"Authorization": f"Bearer {mock_api_key}"}
        assert auth

    def test_explicit_key_wins_over_env(self, mock_api_key: str) -> None:
        auth = resolve_auth("explicit-key")
        assert auth.headers == {"Authorization": "Bearer explicit-key"}

    def test_empty_explicit_key_falls_back_to_env(self, mock_api_key: str) -> None:
        assert resolve_auth("").headers == {"Authorization": f"Bearer {mock_api_key}"}
