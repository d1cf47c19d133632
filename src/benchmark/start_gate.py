import threading
from typing import Optional


class StartGate:
    """One-shot latch: every waiter is released by a single open()"""

    def __init__(self):
        self._opened = threading.Event()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._opened.wait(timeout)

    def open(self):
        self._opened.set()

    @property
    def is_open(self) -> bool:
        return self._opened.is_set()
