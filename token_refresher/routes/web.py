from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from token_refresher.security import get_security_service, require_worker_auth

router = APIRouter(tags=["web"])

HELP_TEXT = (
    "GameHub Token Refresher\n\n"
    "Endpoints:\n"
    "GET /token - Get current token\n"
    "POST /refresh - Manually refresh token"
)


@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    return HELP_TEXT


@router.get("/status")
async def refresh_status(request: Request, _: None = Depends(require_worker_auth)) -> Dict[str, Any]:
    scheduler = getattr(request.app.state, "refresh_scheduler", None)
    payload: Dict[str, Any] = {"scheduler": None}
    if scheduler:
        current = scheduler.status()
        payload["scheduler"] = {
            "running": current.running,
            "last_started_at": current.last_started_at,
            "last_completed_at": current.last_completed_at,
            "last_error": current.last_error,
            "last_refreshed_at": current.last_refreshed_at.isoformat() if current.last_refreshed_at else None,
            "success_count": current.success_count,
            "failure_count": current.failure_count,
        }
    payload["security"] = get_security_service(request).get_security_stats()
    return payload
