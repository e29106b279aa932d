"""GameHub token refresher - FastAPI entry point.

Application setup, lifespan management and router wiring.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from token_refresher import __version__
from token_refresher.config import (
    REFRESH_INTERVAL_MINUTES,
    REFRESH_SCHEDULER_ENABLED,
    SETTLE_DELAY_SECONDS,
    logger,
)
from token_refresher.core import TokenRefreshScheduler, TokenRefreshService, build_refresh_service
from token_refresher.routes import routers
from token_refresher.security import SecurityService, WorkerAuthRejected


def create_app(
    service: Optional[TokenRefreshService] = None,
    security: Optional[SecurityService] = None,
    *,
    scheduler_enabled: bool = REFRESH_SCHEDULER_ENABLED,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("Starting GameHub token refresher...")
        if getattr(app.state, "refresh_service", None) is None:
            app.state.refresh_service = build_refresh_service()
        logger.info("Settle delay=%ss, refresh interval=%s minutes", SETTLE_DELAY_SECONDS, REFRESH_INTERVAL_MINUTES)
        scheduler = None
        if scheduler_enabled:
            scheduler = TokenRefreshScheduler(
                app.state.refresh_service,
                lambda: True,
                lambda: REFRESH_INTERVAL_MINUTES,
            )
            app.state.refresh_scheduler = scheduler
            scheduler.start()
        try:
            yield
        finally:
            logger.info("Shutting down GameHub token refresher...")
            if scheduler:
                await scheduler.stop()
            logger.info("Application shutdown complete.")

    app = FastAPI(
        title="GameHub Token Refresher",
        description="Keeps a GameHub login token fresh via the email OTP flow",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.refresh_service = service
    app.state.refresh_scheduler = None
    if security is not None:
        app.state.security_service = security

    @app.exception_handler(WorkerAuthRejected)
    async def worker_auth_rejected(request: Request, exc: WorkerAuthRejected) -> PlainTextResponse:
        return PlainTextResponse(str(exc.detail), status_code=exc.status_code)

    for router in routers:
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    import os

    import uvicorn

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))

    logger.info("Starting GameHub token refresher on %s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_level="info", access_log=True)
