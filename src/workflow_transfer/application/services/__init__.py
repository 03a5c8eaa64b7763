"""Application services public API."""

from workflow_transfer.application.services.transfer_manager import TransferManager
from workflow_transfer.application.services.transfer_sessions import (
    TransferManagerFactory,
    TransferSessionService,
)

__all__ = ["TransferManager", "TransferManagerFactory", "TransferSessionService"]
