"""Plugin contracts, registry and built-in plugins."""

from pathlib import Path

from workflow_transfer.plugins.base import (
    DeduplicatorPlugin,
    Plugin,
    ReporterPlugin,
    ValidatorPlugin,
)
from workflow_transfer.plugins.deduplicators import FuzzyDeduplicator, StandardDeduplicator
from workflow_transfer.plugins.registry import (
    ENTRY_POINT_GROUP,
    PluginDiscoveryResult,
    PluginRegistry,
)
from workflow_transfer.plugins.reporters import CsvReporter, JsonReporter, MarkdownReporter
from workflow_transfer.plugins.validators import IntegrityValidator, SchemaValidator


def build_default_registry(
    reports_dir: str | Path = "reports",
    *,
    fuzzy_threshold: float = 0.85,
) -> PluginRegistry:
    """Return a registry holding every built-in plugin."""

    registry = PluginRegistry()
    registry.register(StandardDeduplicator())
    registry.register(FuzzyDeduplicator(threshold=fuzzy_threshold))
    registry.register(IntegrityValidator())
    registry.register(SchemaValidator())
    registry.register(MarkdownReporter(output_dir=reports_dir))
    registry.register(JsonReporter(output_dir=reports_dir))
    registry.register(CsvReporter(output_dir=reports_dir))
    return registry


__all__ = [
    "CsvReporter",
    "DeduplicatorPlugin",
    "ENTRY_POINT_GROUP",
    "FuzzyDeduplicator",
    "IntegrityValidator",
    "JsonReporter",
    "MarkdownReporter",
    "Plugin",
    "PluginDiscoveryResult",
    "PluginRegistry",
    "ReporterPlugin",
    "SchemaValidator",
    "StandardDeduplicator",
    "ValidatorPlugin",
    "build_default_registry",
]
