"""Structural integrity validator for workflow graphs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from workflow_transfer.domain.models import ValidatorResult, WorkflowRecord
from workflow_transfer.plugins.base import ValidatorPlugin


class _NodeIndex:
    """Resolve connection references by node id or node name."""

    def __init__(self, nodes: list[Any]) -> None:
        self.keys: list[str] = []
        self._lookup: dict[str, str] = {}
        self._labels: dict[str, str] = {}
        for position, node in enumerate(nodes):
            if not isinstance(node, Mapping):
                continue
            node_id = node.get("id")
            name = node.get("name")
            if node_id is not None:
                key = str(node_id)
            elif isinstance(name, str) and name:
                key = name
            else:
                key = f"#{position}"
            self.keys.append(key)
            self._labels[key] = _node_label(node, key)
            for alias in (node_id, name):
                if alias is None or alias == "":
                    continue
                self._lookup.setdefault(str(alias), key)

    def resolve(self, reference: Any) -> str | None:
        if reference is None:
            return None
        return self._lookup.get(str(reference))

    def label(self, key: str) -> str:
        return self._labels.get(key, key)


class IntegrityValidator(ValidatorPlugin):
    """Check nodes, connections, credentials, orphans and cycles."""

    def __init__(self) -> None:
        super().__init__(
            "integrity-validator",
            description=(
                "Validates workflow structure: nodes, connections, credentials, "
                "orphaned nodes and circular dependencies"
            ),
        )

    def validate(self, record: WorkflowRecord) -> ValidatorResult:
        errors: list[str] = []
        warnings: list[str] = []

        nodes = record.get("nodes")
        if not isinstance(nodes, list) or not nodes:
            errors.append("Workflow has no nodes; at least one node is required")
            return ValidatorResult(valid=False, errors=tuple(errors))

        index = _NodeIndex(nodes)
        connections = record.get("connections")
        edges = self._check_connections(connections, index, errors, warnings)
        self._check_nodes(nodes, warnings)
        self._check_orphans(index, edges, warnings)
        self._check_cycles(index, edges, errors)

        return ValidatorResult(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))

    def _check_connections(
        self,
        connections: Any,
        index: _NodeIndex,
        errors: list[str],
        warnings: list[str],
    ) -> dict[str, list[str]] | None:
        if not isinstance(connections, Mapping):
            warnings.append("Workflow has no connections defined")
            return None

        edges: dict[str, list[str]] = {}
        for source_ref, connection_types in connections.items():
            source = index.resolve(source_ref)
            if source is None:
                errors.append(f'Connection source node "{source_ref}" does not exist')
                continue
            targets = edges.setdefault(source, [])
            if not isinstance(connection_types, Mapping):
                warnings.append(f'Connections of node "{source_ref}" are not an object')
                continue

            for connection_type, outputs in connection_types.items():
                if not isinstance(outputs, list):
                    warnings.append(
                        f'Connection type "{connection_type}" on node "{source_ref}" is not a list'
                    )
                    continue
                for output_index, output in enumerate(outputs):
                    if output is None:
                        continue
                    if not isinstance(output, list):
                        warnings.append(
                            f'Connection output {output_index} on node "{source_ref}" is not a list'
                        )
                        continue
                    for connection in output:
                        if not isinstance(connection, Mapping):
                            warnings.append(
                                f'Invalid connection (not an object) on node "{source_ref}"'
                            )
                            continue
                        target_ref = connection.get("node")
                        if not target_ref:
                            errors.append(
                                f'Connection on node "{source_ref}" has no target "node" property'
                            )
                            continue
                        target = index.resolve(target_ref)
                        if target is None:
                            errors.append(
                                f'Connection from "{source_ref}" to "{target_ref}" '
                                "references a missing target node"
                            )
                            continue
                        targets.append(target)
        return edges

    def _check_nodes(self, nodes: list[Any], warnings: list[str]) -> None:
        for position, node in enumerate(nodes):
            if not isinstance(node, Mapping):
                warnings.append(f"Node at position {position} is not an object")
                continue
            label = _node_label(node, f"#{position}")
            credentials = node.get("credentials")
            if isinstance(credentials, Mapping):
                if not credentials:
                    warnings.append(f"Node {label} has an empty credentials property")
                for credential_type, credential in credentials.items():
                    if not isinstance(credential, Mapping):
                        warnings.append(
                            f'Node {label} has an invalid credential "{credential_type}"'
                        )
                    elif not credential.get("id") and not credential.get("name"):
                        warnings.append(
                            f'Node {label} has credential "{credential_type}" without id or name'
                        )
            if node.get("disabled") is True:
                warnings.append(f"Node {label} is disabled")

    def _check_orphans(
        self,
        index: _NodeIndex,
        edges: dict[str, list[str]] | None,
        warnings: list[str],
    ) -> None:
        if not edges:
            if len(index.keys) > 1:
                warnings.append(
                    f"Workflow has {len(index.keys)} nodes but no connections; "
                    "all nodes are orphaned"
                )
            return

        connected = set(edges)
        for targets in edges.values():
            connected.update(targets)
        for key in index.keys:
            if key not in connected:
                warnings.append(
                    f"Node {index.label(key)} is orphaned; "
                    "it has no incoming or outgoing connections"
                )

    def _check_cycles(
        self,
        index: _NodeIndex,
        edges: dict[str, list[str]] | None,
        errors: list[str],
    ) -> None:
        if not edges:
            return

        visited: set[str] = set()
        on_path: set[str] = set()

        def visit(key: str, path: list[str]) -> list[str] | None:
            visited.add(key)
            on_path.add(key)
            path.append(key)
            for neighbor in edges.get(key, ()):
                if neighbor in on_path:
                    return [*path[path.index(neighbor):], neighbor]
                if neighbor not in visited:
                    cycle = visit(neighbor, path)
                    if cycle is not None:
                        return cycle
            on_path.discard(key)
            path.pop()
            return None

        for key in index.keys:
            if key in visited:
                continue
            cycle = visit(key, [])
            if cycle is not None:
                errors.append(
                    "Circular dependency detected: "
                    + " -> ".join(index.label(step) for step in cycle)
                )
                return


def _node_label(node: Mapping[str, Any], fallback: str) -> str:
    name = node.get("name")
    node_id = node.get("id")
    if isinstance(name, str) and name and node_id is not None:
        return f'"{name}" ({node_id})'
    if isinstance(name, str) and name:
        return f'"{name}"'
    return f'"{node_id}"' if node_id is not None else fallback


__all__ = ["IntegrityValidator"]
