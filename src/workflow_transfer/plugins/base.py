"""Plugin base classes for deduplicators, validators and reporters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar

from workflow_transfer.domain.models import (
    PluginInfo,
    TransferSummary,
    ValidatorResult,
    WorkflowRecord,
)
from workflow_transfer.domain.transfer_types import PluginType

REQUIRED_METHODS: dict[PluginType, tuple[str, ...]] = {
    PluginType.DEDUPLICATOR: ("is_duplicate", "get_reason"),
    PluginType.VALIDATOR: ("validate",),
    PluginType.REPORTER: ("generate",),
}


class Plugin(ABC):
    """Named, versioned and toggleable unit of transfer behavior."""

    plugin_type: ClassVar[PluginType]

    def __init__(
        self,
        name: str,
        *,
        version: str = "1.0.0",
        description: str = "",
        options: Mapping[str, Any] | None = None,
        enabled: bool = True,
    ) -> None:
        normalized = name.strip()
        if not normalized:
            raise ValueError("Plugin name must not be empty.")
        self._name = normalized
        self._version = version
        self._description = description
        self._options: dict[str, Any] = dict(options or {})
        self._enabled = enabled

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def type(self) -> PluginType:
        return self.plugin_type

    @property
    def description(self) -> str:
        return self._description

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def options(self) -> dict[str, Any]:
        """Return a copy of the plugin options."""

        return dict(self._options)

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def set_options(self, options: Mapping[str, Any]) -> None:
        """Merge options into the current option set."""

        self._options.update(options)

    def get_option(self, key: str, default: Any = None) -> Any:
        return self._options.get(key, default)

    def info(self) -> PluginInfo:
        """Return a serializable description of this plugin."""

        return PluginInfo(
            name=self.name,
            version=self.version,
            type=self.type,
            enabled=self.enabled,
            description=self.description,
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, version={self.version!r})"


class DeduplicatorPlugin(Plugin):
    """Decides whether a SOURCE workflow already exists on TARGET."""

    plugin_type = PluginType.DEDUPLICATOR

    @abstractmethod
    def is_duplicate(
        self,
        record: WorkflowRecord,
        target_workflows: Sequence[WorkflowRecord],
    ) -> bool:
        """Return whether `record` matches one of `target_workflows`."""

    @abstractmethod
    def get_reason(self) -> str | None:
        """Describe the most recent positive match."""


class ValidatorPlugin(Plugin):
    """Checks a workflow before it is transferred."""

    plugin_type = PluginType.VALIDATOR

    @abstractmethod
    def validate(self, record: WorkflowRecord) -> ValidatorResult:
        """Return the verdict for one workflow."""


class ReporterPlugin(Plugin):
    """Renders a transfer summary to a file."""

    plugin_type = PluginType.REPORTER

    @abstractmethod
    def generate(self, summary: TransferSummary) -> str:
        """Write a report and return its path."""


__all__ = [
    "DeduplicatorPlugin",
    "Plugin",
    "REQUIRED_METHODS",
    "ReporterPlugin",
    "ValidatorPlugin",
]
