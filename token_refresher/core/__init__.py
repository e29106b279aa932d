from .refresh import TokenRefreshService, build_refresh_service, load_settings, mask_token
from .scheduler import TokenRefreshScheduler, TokenRefreshStatus

__all__ = [
    "TokenRefreshScheduler",
    "TokenRefreshService",
    "TokenRefreshStatus",
    "build_refresh_service",
    "load_settings",
    "mask_token",
]
