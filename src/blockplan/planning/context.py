from __future__ import annotations

import threading
import time

from blockplan.core.errors import PlanCancelled, PlanDeadlineExceeded


class PlanContext:
    """
    Cooperative cancellation signal for a planning run.

    Planners call check() between blocks (and between rollout ticks); once
    cancelled or past its deadline, check() raises the same error err() returns.
    Safe to cancel from another thread.
    """

    def __init__(self, timeout_s: float | None = None) -> None:
        self._event = threading.Event()
        self._reason = "plan cancelled"
        self._timeout_s = timeout_s
        self._deadline = time.monotonic() + timeout_s if timeout_s is not None else None
        self._err: PlanCancelled | None = None
        self._lock = threading.Lock()

    @staticmethod
    def background() -> PlanContext:
        return PlanContext()

    @staticmethod
    def with_timeout(timeout_s: float) -> PlanContext:
        return PlanContext(timeout_s=timeout_s)

    def cancel(self, reason: str | None = None) -> None:
        if reason:
            self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self.err() is not None

    def err(self) -> PlanCancelled | None:
        with self._lock:
            if self._err is not None:
                return self._err
            if self._event.is_set():
                self._err = PlanCancelled(self._reason)
            elif self._deadline is not None and time.monotonic() >= self._deadline:
                self._err = PlanDeadlineExceeded(self._timeout_s or 0.0)
            return self._err

    def check(self) -> None:
        err = self.err()
        if err is not None:
            raise err
