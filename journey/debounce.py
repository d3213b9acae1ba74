"""
journey.debounce — Cancel-and-restart delayed calls.

Each ``call()`` cancels whatever is pending and schedules the function
again after ``delay`` seconds, so only the most recent call runs once
input has been idle for the full interval.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Tuple

log = logging.getLogger(__name__)


class Debouncer:
    """Debounce calls to *func* by *delay* seconds.

    The function runs on a ``threading.Timer`` thread.  ``flush()`` runs
    a pending call immediately on the caller's thread.
    """

    def __init__(self, delay: float, func: Callable[..., Any]) -> None:
        if delay < 0:
            raise ValueError("delay must be >= 0")
        self.delay = delay
        self.func = func
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._args: Tuple[Any, ...] = ()
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def call(self, *args: Any) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            self._args = args
            timer = threading.Timer(self.delay, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
        timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._generation += 1

    def flush(self) -> bool:
        """Run the pending call now.  Returns False if nothing was pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._timer.cancel()
            self._timer = None
            self._generation += 1
            args = self._args
        self.func(*args)
        return True

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a later call() or cancel() superseded this timer
            if generation != self._generation:
                return
            self._timer = None
            args = self._args
        try:
            self.func(*args)
        except Exception:
            log.exception("Debounced call failed")
