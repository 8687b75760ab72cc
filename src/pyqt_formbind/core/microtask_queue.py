"""Deferred-callback queue drained once after the current synchronous unit of work."""

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, Optional

from PyQt6.QtCore import QCoreApplication, QTimer

from pyqt_formbind.protocols.form_config import get_form_config

logger = logging.getLogger(__name__)


class MicrotaskQueue:
    """
    FIFO queue of callbacks run at the next tick of the host event loop.

    Directives schedule their registration here so that every sibling finishes
    constructing before any control is attached to its parent.

    Usage:
        queue = MicrotaskQueue()
        queue.schedule(lambda: container.register_control("name", control))
        ...
        queue.flush()  # or let the event loop drain it

    When auto-drain is enabled the first scheduled callback requests a drain:
    ``loop.call_soon`` inside a running asyncio loop, else a zero-delay
    single-shot QTimer when a Qt application exists. Otherwise callers drain
    explicitly with flush().
    """

    def __init__(self):
        self._tasks: Deque[Callable[[], None]] = deque()
        self._drain_requested = False
        self._timer: Optional[QTimer] = None

    def schedule(self, callback: Callable[[], None]) -> None:
        """Queue callback to run after the current synchronous pass."""
        self._tasks.append(callback)
        self._request_drain()

    def flush(self) -> int:
        """
        Run queued callbacks, including any scheduled while draining.

        Returns:
            Number of callbacks run
        """
        self._drain_requested = False
        count = 0
        while self._tasks:
            callback = self._tasks.popleft()
            callback()
            count += 1
        if count:
            logger.debug(f"Drained {count} microtask(s)")
        return count

    def clear(self) -> None:
        """Drop queued callbacks without running them."""
        self._tasks.clear()
        self._drain_requested = False
        if self._timer is not None:
            self._timer.stop()
            self._timer = None

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def _request_drain(self) -> None:
        if self._drain_requested or not get_form_config().auto_drain_microtasks:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            loop = None

        if loop is not None:
            loop.call_soon(self.flush)
            self._drain_requested = True
        elif QCoreApplication.instance() is not None:
            self._timer = QTimer()
            self._timer.setSingleShot(True)
            self._timer.timeout.connect(self.flush)
            self._timer.start(0)
            self._drain_requested = True


# Shared queue used by every directive unless one is injected
_default_queue = MicrotaskQueue()


def get_microtask_queue() -> MicrotaskQueue:
    return _default_queue


def schedule_microtask(callback: Callable[[], None]) -> None:
    """Schedule callback on the shared queue."""
    _default_queue.schedule(callback)


def flush_microtasks() -> int:
    """Drain the shared queue. Tests call this before asserting tree shape."""
    return _default_queue.flush()
