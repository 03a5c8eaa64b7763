"""Exact name and tag-set deduplicator."""

from __future__ import annotations

import json
from collections.abc import Sequence

from workflow_transfer.domain.models import WorkflowRecord
from workflow_transfer.domain.workflows import workflow_name, workflow_tag_names
from workflow_transfer.plugins.base import DeduplicatorPlugin


class StandardDeduplicator(DeduplicatorPlugin):
    """Treat a workflow as duplicate when TARGET has the same name and tag set."""

    def __init__(self) -> None:
        super().__init__(
            "standard-deduplicator",
            description="Exact name match with order-independent tag comparison",
        )
        self._last_reason: str | None = None
        self._last_match: WorkflowRecord | None = None

    def is_duplicate(
        self,
        record: WorkflowRecord,
        target_workflows: Sequence[WorkflowRecord],
    ) -> bool:
        self._last_reason = None
        self._last_match = None

        name = workflow_name(record)
        tags = workflow_tag_names(record)
        tag_set = frozenset(tags)
        for candidate in target_workflows:
            if workflow_name(candidate) != name:
                continue
            if frozenset(workflow_tag_names(candidate)) != tag_set:
                continue
            self._last_match = candidate
            self._last_reason = (
                f"Duplicate found: name '{name}' and tags {json.dumps(tags)} already exist"
            )
            return True
        return False

    def get_reason(self) -> str | None:
        return self._last_reason

    @property
    def last_match(self) -> WorkflowRecord | None:
        """Return the TARGET workflow matched by the last positive check."""

        return self._last_match


__all__ = ["StandardDeduplicator"]
