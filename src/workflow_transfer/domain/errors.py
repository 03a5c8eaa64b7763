"""Domain exceptions for workflow transfer operations."""

from __future__ import annotations

from collections.abc import Sequence


class TransferError(Exception):
    """Base class for workflow transfer errors."""


class TransferValidationError(TransferError):
    """Raised when transfer or validation options are malformed."""

    def __init__(self, message: str, issues: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.issues = tuple(issues)


class ConnectivityError(TransferError):
    """Raised when SOURCE or TARGET instance cannot be reached."""

    def __init__(self, instance: str, message: str, suggestion: str | None = None) -> None:
        super().__init__(f"{instance} connection failed: {message}")
        self.instance = instance
        self.suggestion = suggestion


class PluginNotFoundError(TransferError):
    """Raised when a required plugin is not registered."""

    def __init__(self, plugin_type: str, name: str) -> None:
        label = plugin_type.capitalize()
        super().__init__(f"{label} plugin not found: {name}")
        self.plugin_type = plugin_type
        self.name = name


class PluginRegistrationError(TransferError):
    """Raised when a plugin cannot be added to the registry."""


class FetchError(TransferError):
    """Raised when workflow listings cannot be retrieved."""


class TransferStateError(TransferError):
    """Raised when an operation conflicts with the manager state."""


__all__ = [
    "ConnectivityError",
    "FetchError",
    "PluginNotFoundError",
    "PluginRegistrationError",
    "TransferError",
    "TransferStateError",
    "TransferValidationError",
]
