"""Named lookup for deduplicator, validator and reporter plugins."""

from __future__ import annotations

import importlib.metadata
import logging
from dataclasses import dataclass

from workflow_transfer.domain.errors import PluginRegistrationError
from workflow_transfer.domain.transfer_types import PluginType
from workflow_transfer.plugins.base import REQUIRED_METHODS, Plugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "workflow_transfer.plugins"


@dataclass(slots=True, frozen=True)
class PluginDiscoveryResult:
    """Outcome of entry-point plugin discovery."""

    loaded: tuple[str, ...] = ()
    failed: tuple[tuple[str, str], ...] = ()


class PluginRegistry:
    """In-memory plugin registry keyed by plugin name."""

    def __init__(self) -> None:
        self._plugins: dict[str, Plugin] = {}

    def register(self, plugin: Plugin) -> None:
        """Register a plugin; names must be unique."""

        if not isinstance(plugin, Plugin):
            raise PluginRegistrationError(
                f"Plugin must be a Plugin instance, got {type(plugin).__name__}."
            )
        plugin_type = getattr(plugin, "plugin_type", None)
        if plugin_type not in REQUIRED_METHODS:
            raise PluginRegistrationError(
                f"Plugin '{plugin.name}' has an unknown type: {plugin_type!r}."
            )
        missing = [
            method
            for method in REQUIRED_METHODS[plugin_type]
            if not callable(getattr(plugin, method, None))
        ]
        if missing:
            raise PluginRegistrationError(
                f"Plugin '{plugin.name}' is missing required methods: {', '.join(missing)}."
            )
        if plugin.name in self._plugins:
            raise PluginRegistrationError(f"Plugin '{plugin.name}' is already registered.")

        self._plugins[plugin.name] = plugin
        logger.debug("Registered %s plugin %s v%s", plugin.type, plugin.name, plugin.version)

    def get(self, name: str, plugin_type: PluginType | None = None) -> Plugin | None:
        """Return a plugin by name, exact match first, then case-insensitive.

        When `plugin_type` is given, a plugin of another type is treated as missing.
        """

        plugin = self._plugins.get(name)
        if plugin is None:
            lowered = name.lower()
            plugin = next(
                (
                    candidate
                    for candidate_name, candidate in self._plugins.items()
                    if candidate_name.lower() == lowered
                ),
                None,
            )
        if plugin is None:
            return None
        if plugin_type is not None and plugin.type != plugin_type:
            return None
        return plugin

    def get_all(self) -> list[Plugin]:
        return list(self._plugins.values())

    def list_by_type(self, plugin_type: PluginType) -> list[Plugin]:
        return [plugin for plugin in self._plugins.values() if plugin.type == plugin_type]

    def unregister(self, name: str) -> bool:
        """Remove a plugin by exact name; return whether it was registered."""

        return self._plugins.pop(name, None) is not None

    def clear(self) -> None:
        self._plugins.clear()

    def get_stats(self) -> dict[str, object]:
        """Return registry counters grouped by enabled state and type."""

        plugins = list(self._plugins.values())
        enabled = sum(1 for plugin in plugins if plugin.enabled)
        return {
            "total": len(plugins),
            "enabled": enabled,
            "disabled": len(plugins) - enabled,
            "by_type": {
                plugin_type.value: sum(1 for plugin in plugins if plugin.type == plugin_type)
                for plugin_type in PluginType
            },
        }

    def discover(self, group: str = ENTRY_POINT_GROUP) -> PluginDiscoveryResult:
        """Load and register plugins advertised under an entry-point group.

        An entry point may reference a `Plugin` instance, or a class or factory
        returning one. Failures are collected per entry point.
        """

        loaded: list[str] = []
        failed: list[tuple[str, str]] = []
        for entry_point in importlib.metadata.entry_points(group=group):
            try:
                target = entry_point.load()
                plugin = target if isinstance(target, Plugin) else target()
                self.register(plugin)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to load plugin entry point %s: %s", entry_point.name, exc)
                failed.append((entry_point.name, str(exc)))
                continue
            loaded.append(plugin.name)
        return PluginDiscoveryResult(loaded=tuple(loaded), failed=tuple(failed))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __len__(self) -> int:
        return len(self._plugins)


__all__ = ["ENTRY_POINT_GROUP", "PluginDiscoveryResult", "PluginRegistry"]
