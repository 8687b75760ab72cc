"""
Signal blocking for model→view writes.

Accessors write model values into widgets inside block_signals() so the write
never re-enters the view→model pipeline.
"""

from contextlib import contextmanager
from typing import Optional

from PyQt6.QtCore import QObject
import logging

logger = logging.getLogger(__name__)


class SignalService:
    """
    Signal blocking helpers.

    Examples:
        with SignalService.block_signals(checkbox):
            checkbox.setChecked(True)

        with SignalService.block_signals(widget1, widget2):
            widget1.setValue(1)
            widget2.setValue(2)
    """

    @staticmethod
    @contextmanager
    def block_signals(*objects: Optional[QObject]):
        """Context manager for blocking signals; restores each object's previous state."""
        previous = []
        for obj in objects:
            if obj is not None:
                previous.append((obj, obj.blockSignals(True)))
                logger.debug(f"Blocked signals on {type(obj).__name__}")

        try:
            yield
        finally:
            for obj, was_blocked in reversed(previous):
                obj.blockSignals(was_blocked)
