# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Tests for daytona-mcp call command."""

from __future__ import annotations

import json
from unittest.mock import patch

from click.testing import CliRunner

from daytona_mcp import Toolbox
from daytona_mcp.cli import cli
from daytona_mcp.exceptions import InvalidArgumentError

from tests.unit.daytona_mcp.conftest import FakeDaytona


class TestCallCommand:
    def test_success_is_rendered(self, toolbox: Toolbox, fake_daytona: FakeDaytona) -> None:
        fake_daytona.add_sandbox("sb-1")
        runner = CliRunner()

        with patch("daytona_mcp.cli.call.Toolbox") as mock_toolbox_cls:
            mock_toolbox_cls.from_env.return_value = toolbox
            result = runner.invoke(cli, ["call", "getSandbox", "--args", '{"sandbox_id": "sb-1"}'])

        assert result.exit_code == 0
        assert "## Sandbox: sb-1" in result.output
        mock_toolbox_cls.from_env.assert_called_once_with(base_url=None)

    def test_base_url_is_passed_through(self, toolbox: Toolbox) -> None:
        runner = CliRunner()

        with patch("daytona_mcp.cli.call.Toolbox") as mock_toolbox_cls:
            mock_toolbox_cls.from_env.return_value = toolbox
            runner.invoke(
                cli,
                ["--base-url", "http://localhost:3000", "call", "listSandboxes"],
            )

        mock_toolbox_cls.from_env.assert_called_once_with(base_url="http://localhost:3000")

    def test_failure_exits_1(self, toolbox: Toolbox) -> None:
        runner = CliRunner()

        with patch("daytona_mcp.cli.call.Toolbox") as mock_toolbox_cls:
            mock_toolbox_cls.from_env.return_value = toolbox
            result = runner.invoke(cli, ["call", "getSandbox", "--args", '{"sandbox_id": "sb-9"}'])

        assert result.exit_code == 1
        assert "## Error" in result.output
        assert "404 - Sandbox with ID sb-9 not found" in result.output

    def test_json_output(self, toolbox: Toolbox) -> None:
        runner = CliRunner()

        with patch("daytona_mcp.cli.call.Toolbox") as mock_toolbox_cls:
            mock_toolbox_cls.from_env.return_value = toolbox
            result = runner.invoke(
                cli,
                ["call", "deleteSandbox", "-a", '{"sandbox_id": "sb-1"}', "-o", "json"],
            )

        assert result.exit_code == 1
        payload = json.loads(result.output)
        assert payload["ok"] is False
        assert payload["kind"] == "local_invalid"
        assert payload["status_code"] is None

    def test_invalid_json_arguments(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["call", "getSandbox", "--args", "{sandbox_id: sb-1}"])
        assert result.exit_code == 2
        assert "not valid JSON" in result.output

    def test_arguments_must_be_an_object(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["call", "getSandbox", "--args", '["sb-1"]'])
        assert result.exit_code == 2
        assert "must be a JSON object" in result.output

    def test_daytona_error_is_printed_cleanly(self) -> None:
        runner = CliRunner()

        with patch("daytona_mcp.cli.call.Toolbox") as mock_toolbox_cls:
            mock_toolbox_cls.from_env.side_effect = InvalidArgumentError("bad configuration")
            result = runner.invoke(cli, ["call", "listSandboxes"])

        assert result.exit_code == 1
        assert "Error: bad configuration" in result.output
        assert "Traceback" not in result.output
