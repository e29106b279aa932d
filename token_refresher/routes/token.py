from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import JSONResponse

from token_refresher.config import logger
from token_refresher.core import TokenRefreshService
from token_refresher.errors import TokenRefreshError
from token_refresher.models import CredentialRecord, RefreshResponse
from token_refresher.security import require_worker_auth
from token_refresher.storage import load_record

router = APIRouter(tags=["token"])


def get_refresh_service(request: Request) -> TokenRefreshService:
    service = getattr(request.app.state, "refresh_service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Refresh service not initialized")
    return service


@router.get("/token", response_model=CredentialRecord)
async def get_token(
    _: None = Depends(require_worker_auth),
    service: TokenRefreshService = Depends(get_refresh_service),
):
    record = load_record(service.store, service.store_key)
    if record is None:
        return JSONResponse({"error": "No token available"}, status_code=status.HTTP_404_NOT_FOUND)
    return record


@router.post("/refresh", response_model=RefreshResponse)
async def manual_refresh(service: TokenRefreshService = Depends(get_refresh_service)):
    try:
        record = await service.refresh()
    except TokenRefreshError as exc:
        logger.error("Manual token refresh failed: %s", exc)
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected error during manual token refresh: %s", exc, exc_info=True)
        return JSONResponse({"error": str(exc)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return RefreshResponse(token=record.token, refreshed_at=record.refreshed_at)
