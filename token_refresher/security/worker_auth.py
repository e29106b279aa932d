from __future__ import annotations

import hmac
from typing import Optional

from fastapi import HTTPException, Request, status

from token_refresher.config import WORKER_AUTH_HEADER, logger

from .failures import FailureRegistry


class WorkerAuthRejected(HTTPException):
    """Rendered as a plain text 403 by the application exception handler."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def client_ip(request: Request) -> str:
    client = request.client
    return client.host if client else "unknown"


def require_worker_secret(request: Request, secret: Optional[str], failures: FailureRegistry) -> None:
    ip = client_ip(request)
    if failures.is_locked(ip):
        raise WorkerAuthRejected("Temporarily locked")

    if not secret:
        logger.warning("Worker auth secret is not configured; rejecting request from %s", ip)
        raise WorkerAuthRejected()

    provided = request.headers.get(WORKER_AUTH_HEADER)
    if not provided or not hmac.compare_digest(provided.encode("utf-8"), secret.encode("utf-8")):
        failures.register_failure(ip)
        raise WorkerAuthRejected()

    failures.reset(ip)


__all__ = ["WorkerAuthRejected", "client_ip", "require_worker_secret"]
