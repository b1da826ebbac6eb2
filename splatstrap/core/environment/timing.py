"""
Run Duration Tracking.

Wall-clock timer used by ProvisionOrchestrator to report how long a
provisioning run took.
"""

from __future__ import annotations

import time
from typing import Protocol


class TimeTrackerProtocol(Protocol):
    """Structural contract for run timers (mocked in tests)."""

    def start(self) -> None: ...  # pragma: no cover

    def stop(self) -> float: ...  # pragma: no cover

    @property
    def elapsed_seconds(self) -> float: ...  # pragma: no cover

    @property
    def elapsed_formatted(self) -> str: ...  # pragma: no cover


class TimeTracker:
    """Monotonic stopwatch with human-readable formatting."""

    def __init__(self) -> None:
        self._start: float | None = None
        self._end: float | None = None

    def start(self) -> None:
        """Start (or restart) the timer."""
        self._start = time.monotonic()
        self._end = None

    def stop(self) -> float:
        """Stop the timer and return elapsed seconds."""
        if self._start is not None and self._end is None:
            self._end = time.monotonic()
        return self.elapsed_seconds

    @property
    def elapsed_seconds(self) -> float:
        """Seconds since start (up to stop, if stopped); 0.0 if never started."""
        if self._start is None:
            return 0.0
        end = self._end if self._end is not None else time.monotonic()
        return end - self._start

    @property
    def elapsed_formatted(self) -> str:
        """Elapsed time as ``1h 02m 03s``, ``2m 05s`` or ``4.2s``."""
        total = self.elapsed_seconds
        if total < 60:
            return f"{total:.1f}s"
        minutes, seconds = divmod(int(total), 60)
        hours, minutes = divmod(minutes, 60)
        if hours:
            return f"{hours}h {minutes:02d}m {seconds:02d}s"
        return f"{minutes}m {seconds:02d}s"
