"""
Single-use wake-up signal.

Used by FileServerManager to tell the shutdown watcher of a running instance
that it should unblock the accept loop. The signal can be fired once and
never re-armed.
"""

import threading
from typing import Optional


class OneShotSignal:
    """
    A signal that can be fired at most once.

    fire() never blocks. A second fire() raises RuntimeError; callers are
    expected to reject repeat requests before they reach the signal.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._fired = False

    def fire(self) -> None:
        """Fire the signal, waking every waiter."""
        with self._lock:
            if self._fired:
                raise RuntimeError("OneShotSignal already fired")
            self._fired = True
        self._event.set()

    @property
    def fired(self) -> bool:
        return self._fired

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the signal fires.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            True if the signal fired, False on timeout
        """
        return self._event.wait(timeout)
