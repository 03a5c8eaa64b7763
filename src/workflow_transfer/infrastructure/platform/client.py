"""Workflow API client for one automation platform instance."""

from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Any
from urllib.parse import quote

from workflow_transfer.domain.models import ConnectionCheck, WorkflowRecord
from workflow_transfer.infrastructure.http import HttpClient, HttpRequestError

logger = logging.getLogger(__name__)

_AUTH_FAILED_STATUS_CODES = frozenset({401, 403})


class WorkflowApiError(RuntimeError):
    """Raised when a workflow API call is rejected before or after I/O."""


class WorkflowApiClient:
    """Typed wrapper around the platform `/workflows` endpoints."""

    def __init__(
        self,
        http_client: HttpClient,
        *,
        api_base_path: str = "/api/v1",
    ) -> None:
        self._http_client = http_client
        self._api_base_path = _normalize_api_base_path(api_base_path)
        self._fetched = 0
        self._created = 0
        self._updated = 0
        self._deleted = 0

    @property
    def base_url(self) -> str:
        """Return normalized instance base URL."""

        return self._http_client.base_url

    async def test_connection(self) -> ConnectionCheck:
        """Probe the instance by listing workflows; never raises on request errors."""

        try:
            await self._http_client.request(self._workflows_path())
        except HttpRequestError as exc:
            check = _connection_failure(exc)
            logger.warning(
                "Connection check for %s failed: %s",
                self.base_url,
                check.error,
            )
            return check
        return ConnectionCheck(success=True)

    async def get_workflows(self) -> list[WorkflowRecord]:
        """Return the full workflow listing."""

        payload = await self._http_client.request(self._workflows_path())
        if isinstance(payload, dict) and "data" in payload:
            payload = payload["data"]
        if payload is None:
            workflows: list[WorkflowRecord] = []
        elif isinstance(payload, list):
            workflows = [item for item in payload if isinstance(item, dict)]
        else:
            raise WorkflowApiError(
                f"GET {self._workflows_path()} returned an unexpected payload type: "
                f"{type(payload).__name__}"
            )
        self._fetched += len(workflows)
        return workflows

    async def get_workflow(self, workflow_id: str) -> WorkflowRecord:
        """Return one workflow by id."""

        payload = await self._http_client.request(self._workflow_path(workflow_id))
        return self._expect_record(payload, "GET", workflow_id)

    async def create_workflow(self, record: WorkflowRecord) -> WorkflowRecord:
        """Create a workflow; name and node list are required."""

        if not isinstance(record, dict):
            raise WorkflowApiError("Workflow data must be an object.")
        name = record.get("name")
        if not isinstance(name, str) or not name:
            raise WorkflowApiError("Workflow name is required.")
        if not isinstance(record.get("nodes"), list):
            raise WorkflowApiError("Workflow nodes must be a list.")

        payload = await self._http_client.request(
            self._workflows_path(),
            method="POST",
            json=record,
        )
        self._created += 1
        return self._expect_record(payload, "POST", name)

    async def update_workflow(self, workflow_id: str, record: WorkflowRecord) -> WorkflowRecord:
        """Patch an existing workflow."""

        payload = await self._http_client.request(
            self._workflow_path(workflow_id),
            method="PATCH",
            json=record,
        )
        self._updated += 1
        return self._expect_record(payload, "PATCH", workflow_id)

    async def delete_workflow(self, workflow_id: str) -> Any:
        """Delete a workflow by id."""

        payload = await self._http_client.request(
            self._workflow_path(workflow_id),
            method="DELETE",
        )
        self._deleted += 1
        return payload

    def get_stats(self) -> dict[str, int]:
        """Return HTTP counters merged with workflow operation counters."""

        return {
            **asdict(self._http_client.stats),
            "workflows_fetched": self._fetched,
            "workflows_created": self._created,
            "workflows_updated": self._updated,
            "workflows_deleted": self._deleted,
        }

    def _workflows_path(self) -> str:
        return f"{self._api_base_path}/workflows"

    def _workflow_path(self, workflow_id: str) -> str:
        if not workflow_id:
            raise WorkflowApiError("Workflow id is required.")
        return f"{self._workflows_path()}/{quote(str(workflow_id), safe='')}"

    def _expect_record(self, payload: Any, method: str, subject: str) -> WorkflowRecord:
        if isinstance(payload, dict):
            data = payload.get("data")
            if isinstance(data, dict) and "id" not in payload:
                return data
            return payload
        raise WorkflowApiError(
            f"{method} workflow '{subject}' returned an unexpected payload type: "
            f"{type(payload).__name__}"
        )


def _normalize_api_base_path(api_base_path: str) -> str:
    stripped = api_base_path.strip().strip("/")
    return f"/{stripped}" if stripped else ""


def _connection_failure(exc: HttpRequestError) -> ConnectionCheck:
    if exc.status_code in _AUTH_FAILED_STATUS_CODES:
        return ConnectionCheck(
            success=False,
            error="Authentication failed",
            suggestion="Check that the API key is valid and has access to the workflows API.",
        )
    if exc.code == "ECONNREFUSED":
        return ConnectionCheck(
            success=False,
            error="Could not connect to server",
            suggestion="Check that the instance is running and the URL is correct.",
        )
    if exc.code == "ETIMEDOUT":
        return ConnectionCheck(
            success=False,
            error="Connection timeout",
            suggestion="The server is not responding. Check network connectivity.",
        )
    if exc.code == "ENOTFOUND":
        return ConnectionCheck(
            success=False,
            error="Server not found",
            suggestion="Check the instance URL for typos.",
        )
    return ConnectionCheck(success=False, error=str(exc))


__all__ = ["WorkflowApiClient", "WorkflowApiError"]
