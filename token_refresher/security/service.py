from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request

from token_refresher.config import WORKER_AUTH_SECRET

from .failures import FailureRegistry
from .worker_auth import require_worker_secret


class SecurityService:
    def __init__(self, secret: Optional[str] = WORKER_AUTH_SECRET, failures: Optional[FailureRegistry] = None) -> None:
        self._secret = secret
        self.worker_auth_failures = failures or FailureRegistry()

    async def require_worker_auth(self, request: Request) -> None:
        require_worker_secret(request, self._secret, self.worker_auth_failures)

    def get_security_stats(self) -> Dict[str, Any]:
        return self.worker_auth_failures.snapshot()


security_service = SecurityService()

__all__ = ["SecurityService", "security_service"]
