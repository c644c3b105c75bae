"""Background janitor that periodically reclaims expired entries.

The janitor owns a single daemon thread running a fixed-delay schedule: the
first run fires immediately, and every later run starts ``interval_ms`` after
the previous one finished. An overrunning sweep pushes the next one back
instead of letting runs pile up.

Cancelling the janitor only prevents future runs; a run already in progress
completes normally.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from .store import Store

logger = logging.getLogger(__name__)


class JanitorState(Enum):
    """Janitor lifecycle states."""

    IDLE = "idle"  # Constructed, not started
    SCHEDULED = "scheduled"  # Waiting for the next run
    RUNNING = "running"  # Executing the task
    CANCELLED = "cancelled"  # No further runs


def sweep_expired(store: Store, now: Optional[int] = None) -> int:
    """Remove every entry of ``store`` that expired strictly before ``now``.

    Deletes go straight to the store and do not take the cache's access guard.
    A fault on one key is logged and skipped so the rest of the sweep still
    runs; the key is simply picked up again on the next pass.

    Parameters
    ----------
    store: Store
        Store to sweep.
    now: Optional[int]
        Reference time in milliseconds; defaults to the store's clock.

    Returns
    -------
    int
        Number of entries removed.
    """
    if now is None:
        now = store.clock()

    removed = 0
    for key in store.scan_expired(now):
        try:
            if store.discard_expired(key, now):
                removed += 1
        except MemoryError:
            raise
        except Exception:  # pylint: disable=broad-exception-caught
            logger.warning(
                "janitor.sweep.discard_failed", extra={"key": key}, exc_info=True
            )
    logger.debug("janitor.sweep", extra={"removed": removed, "remaining": len(store)})
    return removed


class Janitor:  # pylint: disable=too-many-instance-attributes
    """Cancellable fixed-delay repeating task on a daemon thread.

    Parameters
    ----------
    task: Callable[[], object]
        Work executed on every run; its return value is ignored.
    interval_ms: int
        Delay in milliseconds between the end of one run and the start of the
        next. Must be positive.
    name: str
        Identifier used for the thread name and log events.
    """

    def __init__(
        self, task: Callable[[], object], interval_ms: int, name: str = "janitor"
    ) -> None:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")
        self.name = name
        self.interval_ms = int(interval_ms)
        self.state = JanitorState.IDLE
        self.runs = 0
        self._task = task
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Schedule the first run immediately and keep repeating."""
        with self._lock:
            if self.state is not JanitorState.IDLE:
                raise RuntimeError(
                    f"Janitor '{self.name}' cannot start from state "
                    f"{self.state.value}"
                )
            self.state = JanitorState.SCHEDULED
            self._thread = threading.Thread(
                target=self._loop, name=self.name, daemon=True
            )
        self._thread.start()
        logger.info(
            f"janitor.{self.name}.started",
            extra={"interval_ms": self.interval_ms},
        )

    def cancel(self) -> None:
        """Prevent any further run. Safe to call more than once."""
        with self._lock:
            if self.state is JanitorState.CANCELLED:
                return
            previous = self.state
            self.state = JanitorState.CANCELLED
        self._cancelled.set()
        logger.info(
            f"janitor.{self.name}.cancelled",
            extra={"state_change": f"{previous.value} -> cancelled", "runs": self.runs},
        )

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def is_alive(self) -> bool:
        """Whether the janitor thread is still executing."""
        return self._thread is not None and self._thread.is_alive()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the thread to exit after cancellation.

        Returns True if the thread is gone (or never started).
        """
        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _loop(self) -> None:
        delay = 0.0
        while not self._cancelled.wait(delay):
            with self._lock:
                if self.state is JanitorState.CANCELLED:
                    break
                self.state = JanitorState.RUNNING
            self._run_once()
            delay = self.interval_ms / 1000.0

    def _run_once(self) -> None:
        try:
            self._task()
        except MemoryError:
            with self._lock:
                self.state = JanitorState.CANCELLED
            self._cancelled.set()
            raise
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception(f"janitor.{self.name}.run_failed")
        with self._lock:
            self.runs += 1
            if self.state is JanitorState.RUNNING:
                self.state = JanitorState.SCHEDULED
