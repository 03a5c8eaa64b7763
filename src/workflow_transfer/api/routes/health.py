"""Health check routes."""

from fastapi import APIRouter, Depends

from workflow_transfer.api.dependencies import get_transfer_session_service
from workflow_transfer.application.services import TransferSessionService

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(
    service: TransferSessionService = Depends(get_transfer_session_service),
) -> dict[str, object]:
    """Liveness probe with the transfer state and registered plugin count."""

    return {
        "status": "ok",
        "transfer": service.progress().status.value,
        "plugins": len(service.plugins()),
    }


__all__ = ["router"]
