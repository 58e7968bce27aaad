"""Caller-owned cancellation and deadline signal for blocking calls."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, List, Optional

from .exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class CancelToken:
    """Cancellation flag with an optional deadline.

    The token is created by the caller and passed down to every blocking call.
    ``cancel()`` may be invoked from any thread; callbacks registered with
    :meth:`on_cancel` run on the cancelling thread and are used to abort
    in-flight I/O.
    """

    def __init__(self, timeout: Optional[float] = None, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._deadline = clock() + timeout if timeout is not None else None
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def deadline(self) -> Optional[float]:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def expired(self) -> bool:
        return self._deadline is not None and self._clock() >= self._deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None when there is no deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks)
            self._callbacks.clear()

        for callback in callbacks:
            try:
                callback()
            except Exception as exc:
                logger.debug("Cancel callback failed: %s", exc)

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register ``callback`` and return a function that unregisters it.

        If the token is already cancelled the callback runs immediately.
        """
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)
        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def raise_if_cancelled(self, operation: str = "operation") -> None:
        if self.cancelled:
            raise OperationCancelledError(f"{operation} cancelled", context={"reason": "cancelled"})
        if self.expired:
            raise OperationCancelledError(f"{operation} deadline exceeded", context={"reason": "deadline"})
