"""Application bootstrap/wiring."""

import logging

import httpx

from workflow_transfer.application.services import TransferManager, TransferSessionService
from workflow_transfer.config import Settings
from workflow_transfer.infrastructure.http import HttpClient
from workflow_transfer.infrastructure.platform import WorkflowApiClient
from workflow_transfer.plugins import PluginRegistry, build_default_registry

logger = logging.getLogger(__name__)


def _require(value: str | None, env_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{env_name} is required.")
    return value.strip()


def build_workflow_api_client(
    settings: Settings,
    *,
    url: str,
    api_key: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> WorkflowApiClient:
    """Build an API client for one instance from shared HTTP settings."""

    http_client = HttpClient(
        url,
        headers={settings.api_key_header: api_key, "Accept": "application/json"},
        timeout_seconds=settings.http_timeout_seconds,
        max_retries=settings.http_max_retries,
        retry_base_delay_seconds=settings.http_retry_base_delay_seconds,
        retry_max_jitter_seconds=settings.http_retry_max_jitter_seconds,
        transport=transport,
        sensitive_headers=(settings.api_key_header, "authorization"),
    )
    return WorkflowApiClient(http_client, api_base_path=settings.api_base_path)


def build_plugin_registry(settings: Settings) -> PluginRegistry:
    """Build the registry with built-in and, optionally, entry-point plugins."""

    registry = build_default_registry(
        settings.reports_dir,
        fuzzy_threshold=settings.fuzzy_threshold,
    )
    if settings.discover_plugins:
        result = registry.discover()
        logger.info(
            "Discovered %d plugin(s); %d failed to load.",
            len(result.loaded),
            len(result.failed),
        )
    return registry


def build_transfer_manager(
    settings: Settings,
    plugin_registry: PluginRegistry | None = None,
    *,
    install_signal_handlers: bool | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> TransferManager:
    """Build a manager for the SOURCE and TARGET instances in `settings`."""

    source_url = _require(settings.source_url, "WORKFLOW_TRANSFER_SOURCE_URL")
    source_api_key = _require(settings.source_api_key, "WORKFLOW_TRANSFER_SOURCE_API_KEY")
    target_url = _require(settings.target_url, "WORKFLOW_TRANSFER_TARGET_URL")
    target_api_key = _require(settings.target_api_key, "WORKFLOW_TRANSFER_TARGET_API_KEY")
    if source_url.rstrip("/") == target_url.rstrip("/"):
        logger.warning(
            "SOURCE and TARGET point to the same instance (%s); workflows will be duplicated.",
            source_url,
        )

    if install_signal_handlers is None:
        install_signal_handlers = settings.install_signal_handlers
    return TransferManager(
        build_workflow_api_client(
            settings,
            url=source_url,
            api_key=source_api_key,
            transport=transport,
        ),
        build_workflow_api_client(
            settings,
            url=target_url,
            api_key=target_api_key,
            transport=transport,
        ),
        plugin_registry if plugin_registry is not None else build_plugin_registry(settings),
        install_signal_handlers=install_signal_handlers,
    )


def build_transfer_session_service(settings: Settings) -> TransferSessionService:
    """Build the service graph used by the control API.

    The server owns process signals, so managers built here never install
    signal handlers.
    """

    plugin_registry = build_plugin_registry(settings)

    def manager_factory() -> TransferManager:
        return build_transfer_manager(
            settings,
            plugin_registry,
            install_signal_handlers=False,
        )

    return TransferSessionService(manager_factory, plugin_registry)


__all__ = [
    "build_plugin_registry",
    "build_transfer_manager",
    "build_transfer_session_service",
    "build_workflow_api_client",
]
