"""Background transfer sessions driven by the control API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from workflow_transfer.application.services.transfer_manager import TransferManager
from workflow_transfer.domain.errors import TransferError, TransferStateError
from workflow_transfer.domain.models import (
    PluginInfo,
    TransferOptions,
    TransferProgress,
    TransferSummary,
    ValidateOptions,
    ValidationResult,
)
from workflow_transfer.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

TransferManagerFactory = Callable[[], TransferManager]


class TransferSessionService:
    """Run at most one transfer at a time, each on a fresh manager."""

    def __init__(
        self,
        manager_factory: TransferManagerFactory,
        plugin_registry: PluginRegistry,
    ) -> None:
        self._manager_factory = manager_factory
        self._plugin_registry = plugin_registry
        self._manager: TransferManager | None = None
        self._task: asyncio.Task[None] | None = None
        self._last_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_error(self) -> str | None:
        """Return the fatal error of the last run, if it failed."""

        return self._last_error

    async def start_transfer(
        self,
        options: TransferOptions | Mapping[str, Any] | None,
    ) -> TransferProgress:
        """Validate options and start a transfer in the background."""

        parsed = TransferOptions.parse(options)
        if self.is_running:
            raise TransferStateError("A transfer is already running.")

        manager = self._manager_factory()
        self._manager = manager
        self._last_error = None
        self._task = asyncio.create_task(self._run(manager, parsed), name="workflow-transfer")
        return manager.get_progress()

    async def wait(self) -> None:
        """Wait for the current background transfer to finish."""

        task = self._task
        if task is not None:
            await asyncio.shield(task)

    def progress(self) -> TransferProgress:
        if self._manager is None:
            return TransferProgress()
        return self._manager.get_progress()

    def summary(self) -> TransferSummary | None:
        if self._manager is None:
            return None
        return self._manager.summary

    def cancel(self) -> bool:
        if self._manager is None:
            return False
        return self._manager.cancel()

    async def validate(
        self,
        options: ValidateOptions | Mapping[str, Any] | None,
    ) -> ValidationResult:
        """Run a standalone validation on a dedicated manager."""

        return await self._manager_factory().validate(options)

    def plugins(self) -> list[PluginInfo]:
        return [plugin.info() for plugin in self._plugin_registry.get_all()]

    async def shutdown(self) -> None:
        """Cancel the running transfer cooperatively and wait for it."""

        if not self.is_running:
            return
        self.cancel()
        await self.wait()

    async def _run(self, manager: TransferManager, options: TransferOptions) -> None:
        try:
            await manager.transfer(options)
        except TransferError as exc:
            self._last_error = str(exc)
            logger.warning("Transfer failed: %s", exc)
        except Exception as exc:
            self._last_error = str(exc)
            logger.exception("Transfer failed unexpectedly.")


__all__ = ["TransferManagerFactory", "TransferSessionService"]
