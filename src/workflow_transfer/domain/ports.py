"""Ports for workflow platform access."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from workflow_transfer.domain.models import ConnectionCheck, WorkflowRecord


@runtime_checkable
class WorkflowApi(Protocol):
    """Access port for one automation platform instance."""

    @property
    def base_url(self) -> str:
        """Return normalized instance base URL."""

    async def test_connection(self) -> ConnectionCheck:
        """Probe the instance; never raises on request failures."""

    async def get_workflows(self) -> list[WorkflowRecord]:
        """Return the full workflow listing."""

    async def get_workflow(self, workflow_id: str) -> WorkflowRecord:
        """Return one workflow by id."""

    async def create_workflow(self, record: WorkflowRecord) -> WorkflowRecord:
        """Create a workflow and return the created record."""

    async def update_workflow(self, workflow_id: str, record: WorkflowRecord) -> WorkflowRecord:
        """Patch an existing workflow."""

    async def delete_workflow(self, workflow_id: str) -> Any:
        """Delete a workflow by id."""


__all__ = ["WorkflowApi"]
