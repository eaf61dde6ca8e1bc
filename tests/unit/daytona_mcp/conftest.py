# SPDX-FileCopyrightText: 2025 CoreWeave, Inc.
# SPDX-License-Identifier: Apache-2.0
# SPDX-PackageName: daytona-mcp

"""Shared fixtures for daytona_mcp unit tests."""

from __future__ import annotations

import itertools
import json
import re
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from daytona_mcp import ClientDefaults, HttpxTransport, Toolbox
from daytona_mcp._types import RawResponse, RequestTarget

TEST_BASE_URL = "https://daytona.test"

# Environment variables that affect configuration and authentication.
# These are cleared before each test to ensure isolation.
ENV_VARS = (
    "DAYTONA_API_KEY",
    "DAYTONA_BASE_URL",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear all config-related env vars before each test."""
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def mock_api_key(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set a mock DAYTONA_API_KEY for the test."""
    test_key = "test-api-key"
    monkeypatch.setenv("DAYTONA_API_KEY", test_key)
    return test_key


@pytest.fixture
def mock_base_url(monkeypatch: pytest.MonkeyPatch) -> str:
    """Set a mock DAYTONA_BASE_URL for the test."""
    test_url = "http://test-api.example.com"
    monkeypatch.setenv("DAYTONA_BASE_URL", test_url)
    return test_url


def _json(status_code: int, payload: Any) -> httpx.Response:
    return httpx.Response(status_code, json=payload)


def _not_found(message: str) -> httpx.Response:
    return _json(404, {"statusCode": 404, "message": message, "error": "Not Found"})


class FakeDaytona:
    """In-memory stand-in for the Daytona REST API, served through httpx.MockTransport.

    Sandboxes, sessions, commands and files live in plain dicts. Every
    request is recorded in ``requests``. Asynchronous session commands stay
    running until ``complete_command`` is called.
    """

    def __init__(self) -> None:
        self.sandboxes: dict[str, dict[str, Any]] = {}
        self.sessions: dict[tuple[str, str], dict[str, dict[str, Any]]] = {}
        self.files: dict[tuple[str, str], str] = {}
        self.build_logs: dict[str, str] = {}
        self.requests: list[httpx.Request] = []
        self.ignore_label_filter = False
        self._ids = itertools.count(1)
        self._routes: list[tuple[str, re.Pattern[str], Callable[..., httpx.Response]]] = [
            ("GET", re.compile(r"/sandbox"), self._list_sandboxes),
            ("POST", re.compile(r"/sandbox"), self._create_sandbox),
            ("GET", re.compile(r"/sandbox/([^/]+)"), self._get_sandbox),
            ("DELETE", re.compile(r"/sandbox/([^/]+)"), self._delete_sandbox),
            ("POST", re.compile(r"/sandbox/([^/]+)/(start|stop|archive)"), self._transition),
            ("PUT", re.compile(r"/sandbox/([^/]+)/labels"), self._set_labels),
            ("POST", re.compile(r"/sandbox/([^/]+)/backup"), self._backup),
            ("POST", re.compile(r"/sandbox/([^/]+)/autostop/(\d+)"), self._autostop),
            ("POST", re.compile(r"/sandbox/([^/]+)/autoarchive/(\d+)"), self._autoarchive),
            ("GET", re.compile(r"/sandbox/([^/]+)/ports/(\d+)/preview-url"), self._preview_url),
            ("GET", re.compile(r"/sandbox/([^/]+)/build-logs"), self._build_logs),
            ("POST", re.compile(r"/toolbox/([^/]+)/toolbox/process/execute"), self._execute),
            ("GET", re.compile(r"/toolbox/([^/]+)/toolbox/process/session"), self._list_sessions),
            ("POST", re.compile(r"/toolbox/([^/]+)/toolbox/process/session"), self._create_session),
            ("GET", re.compile(r"/toolbox/([^/]+)/toolbox/process/session/([^/]+)"), self._get_session),
            (
                "DELETE",
                re.compile(r"/toolbox/([^/]+)/toolbox/process/session/([^/]+)"),
                self._delete_session,
            ),
            (
                "POST",
                re.compile(r"/toolbox/([^/]+)/toolbox/process/session/([^/]+)/exec"),
                self._session_exec,
            ),
            (
                "GET",
                re.compile(r"/toolbox/([^/]+)/toolbox/process/session/([^/]+)/command/([^/]+)"),
                self._get_command,
            ),
            (
                "GET",
                re.compile(
                    r"/toolbox/([^/]+)/toolbox/process/session/([^/]+)/command/([^/]+)/logs"
                ),
                self._command_logs,
            ),
            ("GET", re.compile(r"/toolbox/([^/]+)/toolbox/project-dir"), self._project_dir),
            ("GET", re.compile(r"/toolbox/([^/]+)/toolbox/files"), self._list_files),
            ("GET", re.compile(r"/toolbox/([^/]+)/toolbox/files/download"), self._download),
            ("DELETE", re.compile(r"/toolbox/([^/]+)/toolbox/files"), self._delete_file),
        ]

    # test helpers

    def add_sandbox(
        self, sandbox_id: str, *, labels: dict[str, str] | None = None, **fields: Any
    ) -> dict[str, Any]:
        record = {"id": sandbox_id, "state": "started", "labels": dict(labels or {}), **fields}
        self.sandboxes[sandbox_id] = record
        return record

    def complete_command(
        self, sandbox_id: str, session_id: str, command_id: str, *, exit_code: int, output: str
    ) -> None:
        command = self.sessions[(sandbox_id, session_id)][command_id]
        command["exitCode"] = exit_code
        command["logs"] = output

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for method, pattern, route in self._routes:
            if request.method != method:
                continue
            match = pattern.fullmatch(request.url.path)
            if match:
                return route(request, *match.groups())
        return _not_found(f"Cannot {request.method} {request.url.path}")

    # sandboxes

    def _find_sandbox(self, sandbox_id: str) -> dict[str, Any] | None:
        return self.sandboxes.get(sandbox_id)

    def _list_sandboxes(self, request: httpx.Request) -> httpx.Response:
        records = list(self.sandboxes.values())
        raw_labels = request.url.params.get("labels")
        if raw_labels and not self.ignore_label_filter:
            wanted = json.loads(raw_labels)
            records = [
                r for r in records if all(r["labels"].get(k) == v for k, v in wanted.items())
            ]
        return _json(200, records)

    def _create_sandbox(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        sandbox_id = f"sb-{next(self._ids)}"
        record = {"id": sandbox_id, "state": "started", "labels": body.get("labels", {}), **body}
        self.sandboxes[sandbox_id] = record
        return _json(200, record)

    def _get_sandbox(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        return _json(200, record)

    def _delete_sandbox(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        if self.sandboxes.pop(sandbox_id, None) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        return httpx.Response(200)

    def _transition(self, request: httpx.Request, sandbox_id: str, action: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        if action == "archive" and record["state"] != "stopped":
            return _json(400, {"statusCode": 400, "message": "Sandbox is not stopped"})
        record["state"] = {"start": "started", "stop": "stopped", "archive": "archived"}[action]
        return httpx.Response(200)

    def _set_labels(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        record["labels"] = json.loads(request.content)["labels"]
        return _json(200, {"labels": record["labels"]})

    def _backup(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        record["backupState"] = "pending"
        return _json(200, record)

    def _autostop(self, request: httpx.Request, sandbox_id: str, minutes: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        record["autoStopInterval"] = int(minutes)
        return httpx.Response(200)

    def _autoarchive(self, request: httpx.Request, sandbox_id: str, minutes: str) -> httpx.Response:
        record = self._find_sandbox(sandbox_id)
        if record is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        record["autoArchiveInterval"] = int(minutes)
        return httpx.Response(200)

    def _preview_url(self, request: httpx.Request, sandbox_id: str, port: str) -> httpx.Response:
        if self._find_sandbox(sandbox_id) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        return _json(200, {"url": f"https://{port}-{sandbox_id}.proxy.daytona.test", "token": "tok"})

    def _build_logs(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        if self._find_sandbox(sandbox_id) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        return httpx.Response(200, text=self.build_logs.get(sandbox_id, ""))

    # commands and sessions

    @staticmethod
    def _run(command: str) -> tuple[int, str]:
        if command.startswith("echo "):
            return 0, command[len("echo "):] + "\n"
        if command.startswith("exit "):
            return int(command[len("exit "):]), ""
        return 0, ""

    def _execute(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        if self._find_sandbox(sandbox_id) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        body = json.loads(request.content)
        exit_code, output = self._run(body["command"])
        return _json(200, {"exitCode": exit_code, "result": output})

    def _list_sessions(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        sessions = [
            {"sessionId": sid, "commands": list(commands.values())}
            for (sb, sid), commands in self.sessions.items()
            if sb == sandbox_id
        ]
        return _json(200, sessions)

    def _create_session(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        if self._find_sandbox(sandbox_id) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        session_id = json.loads(request.content)["sessionId"]
        if (sandbox_id, session_id) in self.sessions:
            return _json(409, {"statusCode": 409, "message": f"Session {session_id} already exists"})
        self.sessions[(sandbox_id, session_id)] = {}
        return httpx.Response(201)

    def _get_session(self, request: httpx.Request, sandbox_id: str, session_id: str) -> httpx.Response:
        commands = self.sessions.get((sandbox_id, session_id))
        if commands is None:
            return _not_found(f"session {session_id} not found")
        return _json(200, {"sessionId": session_id, "commands": list(commands.values())})

    def _delete_session(self, request: httpx.Request, sandbox_id: str, session_id: str) -> httpx.Response:
        if self.sessions.pop((sandbox_id, session_id), None) is None:
            return _not_found(f"session {session_id} not found")
        return httpx.Response(204)

    def _session_exec(self, request: httpx.Request, sandbox_id: str, session_id: str) -> httpx.Response:
        commands = self.sessions.get((sandbox_id, session_id))
        if commands is None:
            return _not_found(f"session {session_id} not found")
        body = json.loads(request.content)
        command_id = f"cmd-{next(self._ids)}"
        record: dict[str, Any] = {"id": command_id, "command": body["command"], "exitCode": None}
        commands[command_id] = record
        if body.get("runAsync"):
            return _json(202, {"cmdId": command_id})
        exit_code, output = self._run(body["command"])
        record["exitCode"] = exit_code
        record["logs"] = output
        return _json(200, {"cmdId": command_id, "exitCode": exit_code, "output": output})

    def _command(self, sandbox_id: str, session_id: str, command_id: str) -> dict[str, Any] | None:
        return self.sessions.get((sandbox_id, session_id), {}).get(command_id)

    def _get_command(
        self, request: httpx.Request, sandbox_id: str, session_id: str, command_id: str
    ) -> httpx.Response:
        record = self._command(sandbox_id, session_id, command_id)
        if record is None:
            return _not_found(f"command {command_id} not found")
        return _json(200, {k: v for k, v in record.items() if k != "logs"})

    def _command_logs(
        self, request: httpx.Request, sandbox_id: str, session_id: str, command_id: str
    ) -> httpx.Response:
        record = self._command(sandbox_id, session_id, command_id)
        if record is None:
            return _not_found(f"command {command_id} not found")
        return httpx.Response(200, text=record.get("logs", ""))

    # files

    def _project_dir(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        if self._find_sandbox(sandbox_id) is None:
            return _not_found(f"Sandbox with ID {sandbox_id} not found")
        return _json(200, {"dir": "/home/daytona"})

    def _list_files(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        directory = request.url.params.get("path", "/home/daytona").rstrip("/")
        entries = [
            {"name": path.rsplit("/", 1)[-1], "isDir": False, "size": len(content)}
            for (sb, path), content in sorted(self.files.items())
            if sb == sandbox_id and path.rsplit("/", 1)[0] == directory
        ]
        return _json(200, entries)

    def _download(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        path = request.url.params.get("path", "")
        content = self.files.get((sandbox_id, path))
        if content is None:
            return _not_found(f"file {path} not found")
        return httpx.Response(200, text=content, headers={"content-type": "application/octet-stream"})

    def _delete_file(self, request: httpx.Request, sandbox_id: str) -> httpx.Response:
        path = request.url.params.get("path", "")
        if self.files.pop((sandbox_id, path), None) is None:
            return _not_found(f"file {path} not found")
        return httpx.Response(200)


class RecordingTransport:
    """Transport double that records resolved targets and replays canned outcomes."""

    def __init__(self, *responses: RawResponse | Exception) -> None:
        self.targets: list[RequestTarget] = []
        self._responses = list(responses)
        self.closed = False

    async def request(self, target: RequestTarget) -> RawResponse:
        self.targets.append(target)
        outcome = self._responses.pop(0) if self._responses else RawResponse(200, {})
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_daytona() -> FakeDaytona:
    return FakeDaytona()


@pytest.fixture
def defaults() -> ClientDefaults:
    return ClientDefaults(base_url=TEST_BASE_URL)


@pytest.fixture
def transport(fake_daytona: FakeDaytona, defaults: ClientDefaults) -> HttpxTransport:
    """HttpxTransport whose client talks to the in-memory fake."""
    client = httpx.AsyncClient(
        base_url=TEST_BASE_URL,
        transport=httpx.MockTransport(fake_daytona.handler),
    )
    return HttpxTransport(defaults, client=client)


@pytest.fixture
def toolbox(transport: HttpxTransport, defaults: ClientDefaults) -> Toolbox:
    return Toolbox(transport, defaults=defaults)
