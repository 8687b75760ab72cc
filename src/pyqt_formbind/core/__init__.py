"""
Core scheduling utilities.

The microtask queue defers directive registration until the whole widget
subtree has been declared.
"""

from .microtask_queue import (
    MicrotaskQueue,
    get_microtask_queue,
    schedule_microtask,
    flush_microtasks,
)

__all__ = [
    "MicrotaskQueue",
    "get_microtask_queue",
    "schedule_microtask",
    "flush_microtasks",
]
