"""Mini README: Cooperative cancellation for long running searches.

Usage:
    token = CancellationToken(timeout_seconds=2.0, max_expansions=50_000)
    result = engine.search(initial, goal, 15, cancellation=token)

``cancel`` may be called from any thread; the search polls ``should_stop``
once per node expansion and returns a ``CANCELLED`` outcome.
"""

from __future__ import annotations

import threading
import time
from typing import Optional


class CancellationToken:
    """Explicit cancel flag plus optional time and expansion limits."""

    def __init__(
        self,
        timeout_seconds: Optional[float] = None,
        max_expansions: Optional[int] = None,
    ) -> None:
        if timeout_seconds is not None and timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")
        if max_expansions is not None and max_expansions < 0:
            raise ValueError("max_expansions must not be negative")
        self.timeout_seconds = timeout_seconds
        self.max_expansions = max_expansions
        self._event = threading.Event()
        self._deadline: Optional[float] = None
        self.reason: Optional[str] = None

    def start(self) -> None:
        """Arm the timeout; called by the engine when a search begins."""

        if self.timeout_seconds is not None and self._deadline is None:
            self._deadline = time.monotonic() + self.timeout_seconds

    def cancel(self, reason: str = "cancelled by caller") -> None:
        if self.reason is None:
            self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def should_stop(self, expansions: int) -> bool:
        if self._event.is_set():
            return True
        if self.max_expansions is not None and expansions >= self.max_expansions:
            self.cancel(f"expansion limit {self.max_expansions} reached")
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self.cancel(f"timeout of {self.timeout_seconds}s reached")
            return True
        return False
