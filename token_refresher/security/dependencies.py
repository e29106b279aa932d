from __future__ import annotations

from fastapi import Request

from .service import SecurityService, security_service


def get_security_service(request: Request) -> SecurityService:
    return getattr(request.app.state, "security_service", None) or security_service


async def require_worker_auth(request: Request) -> None:
    await get_security_service(request).require_worker_auth(request)


__all__ = ["get_security_service", "require_worker_auth"]
