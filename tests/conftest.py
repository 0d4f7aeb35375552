"""Shared test fixtures for yapi.

Provides a stub YApi server built on :class:`httpx.MockTransport`, clients
wired to it, isolated config directories, and output-state management.
These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import httpx
import pytest

from yapi.client import YapiClient
from yapi.output import OutputManager, reset_output, set_output

BASE_URL = "http://example.test/"
TOKEN = "T"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time; CliRunner
    swaps those streams, so a stale manager would write to closed files.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Stub server
# ---------------------------------------------------------------------------


class StubServer:
    """Records requests and answers from a route table keyed by path.

    Routes map a path (``/api/project/get``) to either a JSON-serialisable
    payload (sent with status 200) or a callable taking the request and
    returning an :class:`httpx.Response`.
    """

    def __init__(self) -> None:
        self.routes: dict[str, Any] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, payload: Any) -> None:
        self.routes[path] = payload

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.path)
        if handler is None:
            return httpx.Response(404, text="404 page not found")
        if callable(handler):
            return handler(request)
        return httpx.Response(200, json=handler)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def _envelope(data: Any, errcode: int = 0, errmsg: str = "成功！") -> dict[str, Any]:
    return {"errcode": errcode, "errmsg": errmsg, "data": data}


@pytest.fixture
def envelope() -> Callable[..., dict[str, Any]]:
    """Build a ``{errcode, errmsg, data}`` response body."""
    return _envelope


@pytest.fixture
def server() -> StubServer:
    return StubServer()


@pytest.fixture
def make_client(server: StubServer) -> Callable[..., YapiClient]:
    """Factory for clients talking to *server* through a mock transport."""
    created: list[YapiClient] = []

    def _make(base_url: str = BASE_URL, token: str = TOKEN) -> YapiClient:
        http_client = httpx.Client(transport=httpx.MockTransport(server))
        client = YapiClient(base_url, token=token, http_client=http_client)
        created.append(client)
        return client

    yield _make
    for client in created:
        client.transport.http_client.close()


@pytest.fixture
def client(make_client: Callable[..., YapiClient]) -> YapiClient:
    return make_client()


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG dirs at *tmp_path*, clear ``YAPI_*`` env vars and chdir there."""
    monkeypatch.setattr("yapi.config._is_xdg_platform", lambda: True)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    for var in ["YAPI_PROFILE", "YAPI_BASE_URL", "YAPI_TOKEN"]:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    output = OutputManager(no_color=True, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def verbose_output() -> OutputManager:
    output = OutputManager(no_color=True, verbose=True)
    set_output(output)
    yield output
    reset_output()


def _interface_record(id: int = 415, **overrides: Any) -> dict[str, Any]:
    record: dict[str, Any] = {
        "_id": id,
        "uid": 11,
        "catid": 7,
        "project_id": 42,
        "edit_uid": 0,
        "add_time": 1600000000,
        "up_time": 1600000500,
        "status": "done",
        "title": "Create pet",
        "path": "/pets",
        "method": "POST",
        "tag": ["pets"],
        "req_params": [],
        "req_headers": [
            {"name": "Content-Type", "value": "application/json", "required": "1"}
        ],
        "req_query": [],
        "req_body_form": [],
        "req_body_is_json_schema": True,
        "req_body_type": "json",
        "req_body_other": '{"type":"object"}',
        "res_body_is_json_schema": True,
        "res_body_type": "json",
        "res_body": '{"type":"object"}',
        "__v": 0,
        "index": 0,
    }
    record.update(overrides)
    return record


@pytest.fixture
def interface_record() -> Callable[..., dict[str, Any]]:
    """Build a realistic interface record as YApi returns it (extra fields included)."""
    return _interface_record
