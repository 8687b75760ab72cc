"""
Validator composition engine.

Combines n validator functions into one:
- compose(): synchronous validators, run in list order against the same control
- compose_async(): async validators, fanned out concurrently and joined with gather

Error maps from every validator are merged left to right, so on a key collision
the later validator in the list overwrites the earlier one. This is carried over
unchanged from the behaviour users already depend on; do not "fix" it here.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import inspect
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Iterable, List, Optional, Union

from pyqt_formbind.errors import AsyncValidationError, FormConfigurationError

if TYPE_CHECKING:
    from pyqt_formbind.model.abstract_control import AbstractControl

logger = logging.getLogger(__name__)

ErrorMap = Dict[str, Any]
ValidatorFn = Callable[["AbstractControl"], Optional[ErrorMap]]
AsyncValidatorFn = Callable[
    ["AbstractControl"],
    Union[Awaitable[Optional[ErrorMap]], "concurrent.futures.Future[Optional[ErrorMap]]"],
]


def merge_errors(results: Iterable[Optional[ErrorMap]]) -> Optional[ErrorMap]:
    """Merge error maps in order; later keys win. Empty result means no errors."""
    merged: ErrorMap = {}
    for errors in results:
        if errors is not None:
            merged.update(errors)
    return merged or None


def _present(validators: Optional[Iterable[Any]]) -> List[Any]:
    if not validators:
        return []
    present = [v for v in validators if v is not None]
    for validator in present:
        if not callable(validator):
            raise FormConfigurationError(
                f"Expected a validator function, but received {validator!r}"
            )
    return present


def compose(validators: Optional[Iterable[Optional[ValidatorFn]]]) -> Optional[ValidatorFn]:
    """
    Compose synchronous validators into a single validator.

    Args:
        validators: Validator functions; None entries are ignored

    Returns:
        A validator returning the merged error map, or None when no validator
        is left after filtering (meaning "no validation")

    Raises:
        FormConfigurationError: If an entry is neither None nor callable
    """
    present = _present(validators)
    if not present:
        return None

    def composed(control: "AbstractControl") -> Optional[ErrorMap]:
        return merge_errors([validator(control) for validator in present])

    return composed


def running_loop() -> asyncio.AbstractEventLoop:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        raise AsyncValidationError(
            "Async validation needs a running asyncio event loop"
        ) from None


def to_future(result: Any) -> asyncio.Future:
    """
    Normalize an async validator result to a single asyncio future.

    Coroutines are wrapped in a task, asyncio futures pass through and
    concurrent futures are bridged onto the running loop.

    Raises:
        AsyncValidationError: If result is not awaitable or no loop is running
    """
    loop = running_loop()
    if isinstance(result, concurrent.futures.Future):
        return asyncio.wrap_future(result, loop=loop)
    if inspect.isawaitable(result):
        return asyncio.ensure_future(result, loop=loop)
    raise AsyncValidationError(
        f"Expected async validator to return an awaitable, but received {type(result).__name__}"
    )


def compose_async(
    validators: Optional[Iterable[Optional[AsyncValidatorFn]]],
) -> Optional[Callable[["AbstractControl"], Awaitable[Optional[ErrorMap]]]]:
    """
    Compose async validators into a single async validator.

    Every validator is invoked immediately; the composed coroutine waits for
    all of them (no short-circuit) and merges their results like compose().

    Args:
        validators: Async validator functions; None entries are ignored

    Returns:
        Composed async validator, or None when nothing is left after filtering
    """
    present = _present(validators)
    if not present:
        return None

    async def composed(control: "AbstractControl") -> Optional[ErrorMap]:
        futures = [to_future(validator(control)) for validator in present]
        results = await asyncio.gather(*futures)
        return merge_errors(results)

    return composed
