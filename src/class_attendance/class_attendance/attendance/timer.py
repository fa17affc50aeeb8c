from __future__ import annotations

import logging
import threading
from typing import Callable, Optional, Protocol

logger = logging.getLogger(__name__)


class ExpiryTimer(Protocol):
    def start(self) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class SessionTimer:
    """One-shot, cancelable timer that delivers the expiry event to a session.

    Once ``cancel`` has been called the callback is never invoked, even if the
    underlying thread was already about to fire.
    """

    def __init__(self, seconds: float, on_expire: Callable[[], None]):
        self._seconds = float(seconds)
        self._on_expire = on_expire
        self._lock = threading.Lock()
        self._cancelled = False
        self._fired = False
        self._thread: Optional[threading.Timer] = None

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def start(self) -> None:
        with self._lock:
            if self._thread is not None or self._cancelled:
                return
            self._thread = threading.Timer(self._seconds, self._fire)
            self._thread.daemon = True
            self._thread.start()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._thread is not None:
                self._thread.cancel()

    def _fire(self) -> None:
        # The callback runs under the lock so cancel() either precedes it or waits for it.
        with self._lock:
            if self._cancelled or self._fired:
                return
            self._fired = True
            logger.debug("Session timer fired after %.0f seconds", self._seconds)
            self._on_expire()


def threading_timer_factory(seconds: float, on_expire: Callable[[], None]) -> ExpiryTimer:
    return SessionTimer(seconds, on_expire)
