from .dependencies import get_security_service, require_worker_auth
from .failures import FailureEntry, FailureRegistry
from .service import SecurityService, security_service
from .worker_auth import WorkerAuthRejected, client_ip, require_worker_secret

__all__ = [
    "FailureEntry",
    "FailureRegistry",
    "SecurityService",
    "WorkerAuthRejected",
    "client_ip",
    "get_security_service",
    "require_worker_auth",
    "require_worker_secret",
    "security_service",
]
