"""Route modules public API."""

from workflow_transfer.api.routes.health import router as health_router
from workflow_transfer.api.routes.transfers import router as transfers_router

__all__ = ["health_router", "transfers_router"]
