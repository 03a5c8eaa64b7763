"""Dependency providers for FastAPI routes."""

from functools import lru_cache

from workflow_transfer.application.services import TransferSessionService
from workflow_transfer.bootstrap import build_transfer_session_service
from workflow_transfer.config import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return singleton settings."""

    return Settings()


@lru_cache(maxsize=1)
def get_transfer_session_service() -> TransferSessionService:
    """Return singleton service graph."""

    return build_transfer_session_service(get_settings())


__all__ = ["get_settings", "get_transfer_session_service"]
