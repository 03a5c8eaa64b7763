"""Helpers for reading opaque workflow records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from workflow_transfer.domain.models import TransferFilters, WorkflowRecord


def workflow_id(record: Mapping[str, Any]) -> str | None:
    """Return the record id as a string, if present."""

    value = record.get("id")
    if value is None:
        return None
    return str(value)


def workflow_name(record: Mapping[str, Any]) -> str:
    """Return the record name, or an empty string when missing."""

    value = record.get("name")
    return value if isinstance(value, str) else ""


def workflow_nodes(record: Mapping[str, Any]) -> list[Any]:
    """Return the node list, or an empty list when malformed."""

    nodes = record.get("nodes")
    return nodes if isinstance(nodes, list) else []


def workflow_tag_names(record: Mapping[str, Any]) -> list[str]:
    """Return tag names; tags may be plain strings or `{id, name}` objects."""

    tags = record.get("tags")
    if not isinstance(tags, list):
        return []
    return list(_iter_tag_names(tags))


def _iter_tag_names(tags: Iterable[Any]) -> Iterable[str]:
    for tag in tags:
        if isinstance(tag, str):
            yield tag
        elif isinstance(tag, Mapping):
            name = tag.get("name")
            if isinstance(name, str):
                yield name


def workflow_has_credentials(record: Mapping[str, Any]) -> bool:
    """Return whether any node carries a non-empty credentials mapping."""

    for node in workflow_nodes(record):
        if not isinstance(node, Mapping):
            continue
        credentials = node.get("credentials")
        if isinstance(credentials, Mapping) and credentials:
            return True
    return False


def filter_workflows(
    records: Iterable[WorkflowRecord],
    filters: TransferFilters,
) -> list[WorkflowRecord]:
    """Select records matching every non-empty filter category.

    Ids and names match by membership, `tags` requires at least one shared tag
    name and `exclude_tags` rejects any shared tag name.
    """

    ids = set(filters.workflow_ids)
    names = set(filters.workflow_names)
    tags = set(filters.tags)
    excluded = set(filters.exclude_tags)

    selected: list[WorkflowRecord] = []
    for record in records:
        if ids and workflow_id(record) not in ids:
            continue
        if names and workflow_name(record) not in names:
            continue
        record_tags = set(workflow_tag_names(record))
        if tags and not record_tags & tags:
            continue
        if excluded and record_tags & excluded:
            continue
        selected.append(record)
    return selected


__all__ = [
    "filter_workflows",
    "workflow_has_credentials",
    "workflow_id",
    "workflow_name",
    "workflow_nodes",
    "workflow_tag_names",
]
