from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from workflow_transfer.infrastructure.http import HttpClient, HttpRequestError
from workflow_transfer.infrastructure.platform import WorkflowApiClient, WorkflowApiError


def _api(handler, *, api_base_path: str = "/api/v1") -> WorkflowApiClient:
    http_client = HttpClient(
        "https://source.example.com",
        headers={"X-N8N-API-KEY": "source-key"},
        retry_base_delay_seconds=0,
        retry_max_jitter_seconds=0,
        transport=httpx.MockTransport(handler),
    )
    return WorkflowApiClient(http_client, api_base_path=api_base_path)


def test_get_workflows_unwraps_data_envelope() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"data": [{"id": "1", "name": "A"}], "nextCursor": None})

    api = _api(handler)
    workflows = asyncio.run(api.get_workflows())

    assert workflows == [{"id": "1", "name": "A"}]
    assert requests[0].method == "GET"
    assert str(requests[0].url) == "https://source.example.com/api/v1/workflows"
    assert requests[0].headers["X-N8N-API-KEY"] == "source-key"


def test_get_workflows_accepts_plain_list() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"id": "1"}, {"id": "2"}])

    assert len(asyncio.run(_api(handler).get_workflows())) == 2


def test_test_connection_succeeds() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": []})

    check = asyncio.run(_api(handler).test_connection())

    assert check.success is True
    assert check.error is None


@pytest.mark.parametrize("status_code", [401, 403])
def test_test_connection_reports_authentication_failure(status_code: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json={"message": "unauthorized"})

    check = asyncio.run(_api(handler).test_connection())

    assert check.success is False
    assert check.error == "Authentication failed"
    assert check.suggestion is not None


def test_test_connection_reports_refused_connection() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("[Errno 111] Connection refused", request=request)

    check = asyncio.run(_api(handler).test_connection())

    assert check.success is False
    assert check.error == "Could not connect to server"


def test_test_connection_reports_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    check = asyncio.run(_api(handler).test_connection())

    assert check.success is False
    assert check.error == "Connection timeout"


def test_test_connection_reports_other_http_errors_verbatim() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, text="no such route")

    check = asyncio.run(_api(handler).test_connection())

    assert check.success is False
    assert check.error == "HTTP 404: no such route"


def test_create_workflow_posts_record() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        payload = json.loads(request.content.decode())
        return httpx.Response(200, json={**payload, "id": "target-1"})

    api = _api(handler)
    created = asyncio.run(api.create_workflow({"name": "Sync", "nodes": [], "connections": {}}))

    assert created["id"] == "target-1"
    assert requests[0].method == "POST"
    assert str(requests[0].url) == "https://source.example.com/api/v1/workflows"
    assert api.get_stats()["workflows_created"] == 1


@pytest.mark.parametrize(
    "record",
    [
        {"nodes": []},
        {"name": "", "nodes": []},
        {"name": "Sync", "nodes": "not-a-list"},
    ],
)
def test_create_workflow_rejects_invalid_records_without_io(record: dict[str, object]) -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={})

    with pytest.raises(WorkflowApiError):
        asyncio.run(_api(handler).create_workflow(record))

    assert requests == []


def test_get_update_and_delete_use_workflow_paths() -> None:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json={"id": "wf 1", "name": "A"})

    api = _api(handler, api_base_path="api/v1/")

    async def scenario() -> None:
        await api.get_workflow("wf 1")
        await api.update_workflow("wf 1", {"name": "A"})
        assert await api.delete_workflow("wf 1") is None

    asyncio.run(scenario())

    assert [request.method for request in requests] == ["GET", "PATCH", "DELETE"]
    assert {request.url.path for request in requests} == {"/api/v1/workflows/wf 1"}
    stats = api.get_stats()
    assert stats["workflows_updated"] == 1
    assert stats["workflows_deleted"] == 1
    assert stats["total_requests"] == 3
    assert stats["successful_requests"] == 3


def test_get_workflows_propagates_http_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"message": "bad"})

    with pytest.raises(HttpRequestError):
        asyncio.run(_api(handler).get_workflows())
