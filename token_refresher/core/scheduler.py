"""Periodic token refresh scheduling."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from token_refresher.config import logger
from token_refresher.errors import TokenRefreshError

from .refresh import TokenRefreshService

DEFAULT_INTERVAL_MINUTES = 240
MIN_INTERVAL_MINUTES = 5


@dataclass(slots=True)
class TokenRefreshStatus:
    running: bool = False
    last_started_at: float | None = None
    last_completed_at: float | None = None
    last_error: str | None = None
    last_refreshed_at: datetime | None = None
    success_count: int = 0
    failure_count: int = 0


class TokenRefreshScheduler:
    def __init__(
        self,
        service: TokenRefreshService,
        enabled_provider: Callable[[], bool],
        interval_provider: Callable[[], int],
        *,
        run_on_start: bool = True,
    ) -> None:
        self._service = service
        self._enabled_provider = enabled_provider
        self._interval_provider = interval_provider
        self._run_on_start = run_on_start
        self._task: asyncio.Task | None = None
        self._stop_event = asyncio.Event()
        self._trigger_event = asyncio.Event()
        self._status = TokenRefreshStatus()

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Token refresh scheduler started")

    async def stop(self) -> None:
        if not self._task:
            return
        self._stop_event.set()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        finally:
            self._task = None
        logger.info("Token refresh scheduler stopped")

    def trigger_immediate(self) -> None:
        self._trigger_event.set()

    def status(self) -> TokenRefreshStatus:
        return self._status

    async def _run_loop(self) -> None:
        try:
            if not self._run_on_start:
                await self._wait_for_next_run()
            while not self._stop_event.is_set():
                if not self._enabled_provider():
                    await self._sleep_or_stop(5)
                    continue
                self._trigger_event.clear()
                await self.run_once()
                await self._wait_for_next_run()
        except asyncio.CancelledError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.error("Token refresh scheduler crashed: %s", exc, exc_info=True)
        finally:
            self._task = None

    async def run_once(self) -> None:
        self._status.running = True
        self._status.last_started_at = time.time()
        try:
            record = await self._service.refresh()
            self._status.last_refreshed_at = record.refreshed_at
            self._status.last_error = None
            self._status.success_count += 1
        except TokenRefreshError as exc:
            # 下一个周期即为重试
            logger.error("Token refresh failed: %s", exc)
            self._status.last_error = str(exc)
            self._status.failure_count += 1
        except Exception as exc:  # noqa: BLE001
            logger.error("Unexpected error during token refresh: %s", exc, exc_info=True)
            self._status.last_error = str(exc)
            self._status.failure_count += 1
        finally:
            self._status.running = False
            self._status.last_completed_at = time.time()

    async def _wait_for_next_run(self) -> None:
        interval_minutes = max(MIN_INTERVAL_MINUTES, self._interval_provider() or DEFAULT_INTERVAL_MINUTES)
        await self._wait_with_trigger(interval_minutes * 60)

    async def _sleep_or_stop(self, seconds: float) -> None:
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return

    async def _wait_with_trigger(self, timeout: float) -> None:
        waiters = [
            asyncio.create_task(self._stop_event.wait()),
            asyncio.create_task(self._trigger_event.wait()),
        ]
        try:
            await asyncio.wait(waiters, timeout=timeout, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for waiter in waiters:
                waiter.cancel()


__all__ = ["TokenRefreshScheduler", "TokenRefreshStatus"]
