"""Timing records for generation and connection-test calls.

Every call made through :class:`~notepadpro.ai.client.AIClient` is wrapped in
:meth:`PerformanceTracker.track`. The tracker keeps a bounded history of
finished calls and a count of the calls still waiting on the network.
Switching recording on or off never discards that history.
"""

from __future__ import annotations

from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
import logging
import threading
import time
from typing import Any, Deque, Dict, Iterator, Optional

__all__ = ["CallRecord", "CallTimer", "PerformanceTracker", "get_tracker"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CallRecord:
    """One finished provider call."""

    mode: str
    operation: str
    status: str
    duration: float
    output_chars: int
    timeout: Optional[float]
    started_at: float
    model: Optional[str] = None
    error: Optional[str] = None


@dataclass(slots=True)
class CallTimer:
    """Mutable state of a call in flight, handed to the ``with`` body."""

    mode: str
    operation: str
    timeout: Optional[float]
    model: Optional[str] = None
    output_chars: int = 0
    error: Optional[str] = None
    started_at: float = field(default_factory=time.time)
    _clock: float = field(default_factory=time.perf_counter, repr=False)

    def add_output(self, chars: int) -> None:
        self.output_chars += max(0, int(chars))

    def fail(self, message: str) -> None:
        """Mark the call as failed without raising out of the block."""
        self.error = message

    def record(self) -> CallRecord:
        return CallRecord(
            mode=self.mode,
            operation=self.operation,
            status="success" if self.error is None else "error",
            duration=time.perf_counter() - self._clock,
            output_chars=self.output_chars,
            timeout=self.timeout,
            started_at=self.started_at,
            model=self.model,
            error=self.error,
        )


class PerformanceTracker:
    """Bounded history of provider calls, shared by every client."""

    def __init__(self, *, enabled: bool = True, max_records: int = 200) -> None:
        self._lock = threading.Lock()
        self._enabled = enabled
        self._records: Deque[CallRecord] = deque(maxlen=max(1, max_records))
        self._in_flight = 0

    @property
    def enabled(self) -> bool:
        return self._enabled

    def set_enabled(self, enabled: bool) -> None:
        """Turn recording on or off. Existing records are kept."""
        with self._lock:
            if enabled != self._enabled:
                logger.debug("AI call recording %s", "enabled" if enabled else "disabled")
            self._enabled = enabled

    def clear(self) -> None:
        with self._lock:
            self._records.clear()

    @contextmanager
    def track(
        self,
        mode: str,
        *,
        operation: str,
        timeout: Optional[float],
        model: Optional[str] = None,
    ) -> Iterator[CallTimer]:
        timer = CallTimer(mode=mode, operation=operation, timeout=timeout, model=model)
        with self._lock:
            self._in_flight += 1
        try:
            yield timer
        except BaseException as exc:
            if timer.error is None:
                timer.fail(str(exc) or exc.__class__.__name__)
            raise
        finally:
            self._close(timer)

    def _close(self, timer: CallTimer) -> None:
        record = timer.record()
        with self._lock:
            self._in_flight -= 1
            if not self._enabled:
                return
            self._records.append(record)
        logger.debug(
            "AI %s/%s finished: status=%s duration_ms=%.1f output_chars=%d",
            record.mode,
            record.operation,
            record.status,
            record.duration * 1000,
            record.output_chars,
        )

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "enabled": self._enabled,
                "records": list(self._records),
                "in_flight": self._in_flight,
            }


_tracker_lock = threading.Lock()
_tracker: Optional[PerformanceTracker] = None


def get_tracker() -> PerformanceTracker:
    """Return the process-wide tracker, creating it on first use."""

    global _tracker
    with _tracker_lock:
        if _tracker is None:
            _tracker = PerformanceTracker()
        return _tracker
