from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict

from token_refresher.config import LOCK_DURATION_SECONDS, LOCK_THRESHOLD, logger


@dataclass
class FailureEntry:
    attempts: int = 0
    blocked_until: float = 0.0


class FailureRegistry:
    """Tracks rejected worker-auth headers per client address.

    Once ``threshold`` consecutive rejections pile up, the address is blocked
    for ``lock_seconds``; a successful check clears its history.
    """

    def __init__(
        self,
        threshold: int = LOCK_THRESHOLD,
        lock_seconds: float = LOCK_DURATION_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._threshold = threshold
        self._lock_seconds = lock_seconds
        self._clock = clock
        self._entries: Dict[str, FailureEntry] = {}
        self._guard = threading.Lock()
        self._rejections = 0

    def register_failure(self, address: str) -> bool:
        """Record a rejection and report whether ``address`` is now blocked."""
        with self._guard:
            self._rejections += 1
            entry = self._entries.setdefault(address, FailureEntry())
            entry.attempts += 1
            if entry.attempts < self._threshold:
                return False
            entry.blocked_until = self._clock() + self._lock_seconds
        logger.warning("Worker auth blocked for %s during %s seconds", address, self._lock_seconds)
        return True

    def reset(self, address: str) -> None:
        with self._guard:
            self._entries.pop(address, None)

    def is_locked(self, address: str) -> bool:
        with self._guard:
            entry = self._entries.get(address)
            if entry is None or not entry.blocked_until:
                return False
            if entry.blocked_until > self._clock():
                return True
            del self._entries[address]
            return False

    def locked_ips(self) -> list[str]:
        with self._guard:
            now = self._clock()
            return sorted(address for address, entry in self._entries.items() if entry.blocked_until > now)

    def total_failures(self) -> int:
        with self._guard:
            return self._rejections

    def snapshot(self) -> Dict[str, Any]:
        return {
            "failed_worker_auth_attempts": self.total_failures(),
            "locked_ips": self.locked_ips(),
        }


__all__ = ["FailureEntry", "FailureRegistry"]
