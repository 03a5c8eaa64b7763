"""Automation platform API adapters."""

from workflow_transfer.infrastructure.platform.client import (
    WorkflowApiClient,
    WorkflowApiError,
)

__all__ = ["WorkflowApiClient", "WorkflowApiError"]
