"""Transfer control routes: start, monitor, cancel and validate."""

from __future__ import annotations

from typing import Any, NoReturn

from fastapi import APIRouter, Body, Depends, HTTPException

from workflow_transfer.api.dependencies import get_transfer_session_service
from workflow_transfer.application.services import TransferSessionService
from workflow_transfer.domain.errors import (
    ConnectivityError,
    FetchError,
    PluginNotFoundError,
    TransferStateError,
    TransferValidationError,
)
from workflow_transfer.domain.models import (
    PluginInfo,
    TransferProgressResponse,
    TransferSummary,
    ValidationResult,
)

router = APIRouter(tags=["transfers"])


def _raise_http_exception(exc: Exception) -> NoReturn:
    if isinstance(exc, (TransferValidationError, PluginNotFoundError)):
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, TransferStateError):
        raise HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, (ConnectivityError, FetchError)):
        raise HTTPException(status_code=502, detail=str(exc))
    if isinstance(exc, ValueError):
        raise HTTPException(status_code=503, detail=str(exc))
    raise HTTPException(status_code=500, detail="Unexpected transfer error")


@router.post("/transfers", response_model=TransferProgressResponse, status_code=202)
async def start_transfer(
    options: dict[str, Any] | None = Body(default=None),
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> TransferProgressResponse:
    """Start a transfer in the background."""

    try:
        progress = await service.start_transfer(options)
    except Exception as exc:  # noqa: BLE001
        _raise_http_exception(exc)
    return TransferProgressResponse.from_progress(progress)


@router.get("/transfers/progress", response_model=TransferProgressResponse, status_code=200)
async def get_transfer_progress(
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> TransferProgressResponse:
    """Return progress of the current or last transfer."""

    return TransferProgressResponse.from_progress(service.progress())


@router.get("/transfers/summary", response_model=TransferSummary, status_code=200)
async def get_transfer_summary(
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> TransferSummary:
    """Return the summary of the last finished transfer."""

    summary = service.summary()
    if summary is not None:
        return summary
    if service.last_error is not None:
        raise HTTPException(status_code=409, detail=service.last_error)
    raise HTTPException(status_code=404, detail="No finished transfer")


@router.post("/transfers/cancel", status_code=200)
async def cancel_transfer(
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> dict[str, bool]:
    """Request cooperative cancellation of the running transfer."""

    return {"cancelled": service.cancel()}


@router.post("/validations", response_model=ValidationResult, status_code=200)
async def validate_workflows(
    options: dict[str, Any] | None = Body(default=None),
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> ValidationResult:
    """Validate SOURCE workflows without touching TARGET."""

    try:
        return await service.validate(options)
    except Exception as exc:  # noqa: BLE001
        _raise_http_exception(exc)


@router.get("/plugins", response_model=list[PluginInfo], status_code=200)
async def list_plugins(
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> list[PluginInfo]:
    """List registered plugins."""

    return service.plugins()


__all__ = ["router"]
