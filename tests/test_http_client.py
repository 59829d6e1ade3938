# tests/test_http_client.py

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import httpx
import pytest

from taskboard.records.client import HttpRecordClient
from taskboard.records.errors import (
    RecordApiError,
    RecordAuthError,
    RecordConfigError,
    RecordNetworkError,
    RecordNotFoundError,
    RecordValidationError,
    friendly_record_error_message,
)
from taskboard.records.query import Condition, OrderBy


def _settings(**overrides: Any) -> SimpleNamespace:
    base = {
        "api_base_url": "https://records.example.test/api/",
        "api_key": "secret",
        "project_id": "proj-1",
        "api_connect_timeout": 1.0,
        "api_read_timeout": 1.0,
    }
    base.update(overrides)
    return SimpleNamespace(**base)


class Recorder:
    """MockTransport handler that remembers requests and replies from a queue."""

    def __init__(self, *responses: httpx.Response | Exception) -> None:
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self._responses.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    def body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)


def _client(handler: Recorder, **overrides: Any) -> HttpRecordClient:
    return HttpRecordClient(_settings(**overrides), transport=httpx.MockTransport(handler))


@pytest.mark.parametrize("missing", ["api_base_url", "api_key"])
def test_missing_settings_raise_config_error(missing: str) -> None:
    with pytest.raises(RecordConfigError):
        HttpRecordClient(_settings(**{missing: ""}))


def test_fetch_sends_query_and_headers() -> None:
    rec = Recorder(httpx.Response(200, json={"success": True, "data": [{"Id": 1, "title": "a"}]}))
    client = _client(rec)

    rows = client.fetch_records(
        "task",
        fields=["Id", "title"],
        where=[Condition.eq("completed", False)],
        order_by=[OrderBy("Id", descending=True)],
    )

    assert rows == [{"Id": 1, "title": "a"}]
    req = rec.requests[0]
    assert req.method == "POST"
    assert req.url.path == "/api/tables/task/records/fetch"
    assert req.headers["Authorization"] == "Bearer secret"
    assert req.headers["X-Project-Id"] == "proj-1"
    assert rec.body() == {
        "fields": ["Id", "title"],
        "where": [{"field": "completed", "operator": "EqualTo", "values": [False]}],
        "orderBy": [{"field": "Id", "direction": "DESC"}],
    }


def test_fetch_sends_paging_only_when_asked() -> None:
    rec = Recorder(httpx.Response(200, json={"success": True, "data": []}))
    _client(rec).fetch_records("task", limit=10, offset=20)
    assert rec.body()["pagingInfo"] == {"limit": 10, "offset": 20}


def test_project_header_is_optional() -> None:
    rec = Recorder(httpx.Response(200, json={"success": True, "data": []}))
    _client(rec, project_id="").fetch_records("task")
    assert "X-Project-Id" not in rec.requests[0].headers


def test_get_record_and_missing_record() -> None:
    rec = Recorder(
        httpx.Response(200, json={"success": True, "data": {"Id": 7, "title": "x"}}),
        httpx.Response(404, json={"message": "not found"}),
    )
    client = _client(rec)

    assert client.get_record("task", 7, fields=["Id", "title"]) == {"Id": 7, "title": "x"}
    assert rec.requests[0].url.params["fields"] == "Id,title"
    assert client.get_record("task", 8) is None


def test_create_and_update_unwrap_per_record_results() -> None:
    rec = Recorder(
        httpx.Response(200, json={"success": True, "results": [{"success": True, "data": {"Id": 3, "title": "n"}}]}),
        httpx.Response(200, json={"success": True, "results": [{"success": True, "data": {"Id": 3, "title": "m"}}]}),
    )
    client = _client(rec)

    assert client.create_records("task", [{"title": "n"}]) == [{"Id": 3, "title": "n"}]
    assert rec.body(0) == {"records": [{"title": "n"}]}

    assert client.update_records("task", [{"Id": 3, "title": "m"}]) == [{"Id": 3, "title": "m"}]
    assert rec.requests[1].method == "PATCH"


def test_update_requires_ids() -> None:
    client = _client(Recorder())
    with pytest.raises(ValueError):
        client.update_records("task", [{"title": "no id"}])


def test_partial_failure_raises_validation_error() -> None:
    rec = Recorder(
        httpx.Response(
            200,
            json={
                "success": True,
                "results": [{"success": True, "data": {"Id": 1}}, {"success": False, "message": "title required"}],
            },
        )
    )
    with pytest.raises(RecordValidationError, match="title required"):
        _client(rec).create_records("task", [{"title": "a"}, {}])


def test_delete_returns_successful_ids() -> None:
    rec = Recorder(
        httpx.Response(200, json={"success": True, "results": [{"success": True}, {"success": False, "message": "no"}]})
    )
    client = _client(rec)

    assert client.delete_records("task", [4, 5]) == [4]
    assert rec.body() == {"RecordIds": [4, 5]}
    assert client.delete_records("task", []) == []
    assert len(rec.requests) == 1


@pytest.mark.parametrize(
    ("status", "error"),
    [
        (401, RecordAuthError),
        (403, RecordAuthError),
        (400, RecordValidationError),
        (422, RecordValidationError),
        (500, RecordApiError),
    ],
)
def test_http_errors_are_mapped(status: int, error: type[Exception]) -> None:
    rec = Recorder(httpx.Response(status, json={"message": "boom"}))
    with pytest.raises(error, match="boom") as info:
        _client(rec).fetch_records("task")
    assert info.value.status_code == status


def test_fetch_404_is_not_found() -> None:
    rec = Recorder(httpx.Response(404, text="no such table"))
    with pytest.raises(RecordNotFoundError, match="no such table"):
        _client(rec).fetch_records("nope")


def test_success_false_payload_is_validation_error() -> None:
    rec = Recorder(httpx.Response(200, json={"success": False, "message": "bad where"}))
    with pytest.raises(RecordValidationError, match="bad where"):
        _client(rec).fetch_records("task")


def test_invalid_json_is_api_error() -> None:
    rec = Recorder(httpx.Response(200, text="<html>"))
    with pytest.raises(RecordApiError, match="invalid JSON"):
        _client(rec).fetch_records("task")


def test_transport_failures_are_network_errors() -> None:
    rec = Recorder(
        httpx.ConnectTimeout("timed out"),
        httpx.ConnectError("refused"),
    )
    client = _client(rec)

    with pytest.raises(RecordNetworkError, match="timeout"):
        client.fetch_records("task")
    with pytest.raises(RecordNetworkError, match="connection error"):
        client.fetch_records("task")


def test_friendly_messages() -> None:
    assert "TASKBOARD_API_KEY" in friendly_record_error_message(RecordAuthError("x"))
    assert "network" in friendly_record_error_message(RecordNetworkError("x"))
    assert friendly_record_error_message(RecordValidationError("title required")) == "title required"
    assert friendly_record_error_message(RecordApiError("  ")) == "Record API error."
