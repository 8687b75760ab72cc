"""
Abstract control node.

Base state machine shared by FormControl, FormGroup and FormArray:
- value / status / errors tracking
- pristine / touched interaction flags
- sync + async validator composition with last-run-wins async results
- status bubbling to every ancestor

Status transitions are driven by update_value_and_validity(); everything else
(set_value, disable, enable, reset...) funnels into it.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Set, Tuple, Union

from PyQt6.QtCore import QObject, pyqtSignal

from pyqt_formbind.model.status import ControlStatus, UpdateOn
from pyqt_formbind.protocols.form_config import get_form_config
from pyqt_formbind.validation.composition import ErrorMap, compose, compose_async, running_loop, to_future
from pyqt_formbind.validation.validator_set import ValidatorSet

logger = logging.getLogger(__name__)

PathLike = Union[str, int, Sequence[Union[str, int]]]


class _Unset:
    """Marker for "argument not supplied" where None is a meaningful value."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET = _Unset()


def _noop() -> None:
    pass


@dataclass(frozen=True)
class FormState:
    """Boxed initial state: a value plus its disabled flag."""
    value: Any = None
    disabled: bool = False


def unbox_form_state(state: Any) -> Tuple[Any, Optional[bool]]:
    """
    Split a possibly boxed state into (value, disabled).

    Accepts FormState or a mapping with exactly the keys ``value`` and
    ``disabled``. disabled is None for plain values.
    """
    if isinstance(state, FormState):
        return state.value, state.disabled
    if isinstance(state, Mapping) and set(state.keys()) == {"value", "disabled"}:
        return state["value"], bool(state["disabled"])
    return state, None


class ControlEvents(QObject):
    """Notification streams of a single control node."""

    value_changed = pyqtSignal(object)
    status_changed = pyqtSignal(object)
    touched_changed = pyqtSignal(object)
    pristine_changed = pyqtSignal(object)


class AbstractControl(ABC):
    """
    Base class for every control node.

    Subclasses define how children are stored and how the aggregate value is
    built; this class owns status, errors, validators and interaction flags.

    Notification streams are Qt signals:
        control.value_changed.connect(on_value)
        control.status_changed.connect(on_status)
        control.value_changed.disconnect(on_value)
    """

    def __init__(self, validators=None, async_validators=None, update_on: Optional[Union[UpdateOn, str]] = None):
        self._validators = ValidatorSet(validators, composer=compose)
        self._async_validators = ValidatorSet(async_validators, composer=compose_async)
        self._update_on: Optional[UpdateOn] = UpdateOn(update_on) if update_on is not None else None
        self._parent: Optional[AbstractControl] = None

        self._value: Any = None
        self._status = ControlStatus.VALID
        self._errors: Optional[ErrorMap] = None
        self._pristine = True
        self._touched = False
        self._pending_dirty = False
        self._pending_touched = False

        # Async validation bookkeeping: a run only applies if its id is still current
        self._validation_id = 0
        self._async_pending = False
        self._in_flight: Set[asyncio.Future] = set()

        self._on_collection_change: Callable[[], None] = _noop
        self._on_disabled_change: List[Callable[[bool], None]] = []
        self._events = ControlEvents()

    # ========== READ-ONLY STATE ==========

    @property
    def value(self) -> Any:
        return self._value

    @property
    def status(self) -> ControlStatus:
        return self._status

    @property
    def errors(self) -> Optional[ErrorMap]:
        return self._errors

    @property
    def valid(self) -> bool:
        return self._status == ControlStatus.VALID

    @property
    def invalid(self) -> bool:
        return self._status == ControlStatus.INVALID

    @property
    def pending(self) -> bool:
        return self._status == ControlStatus.PENDING

    @property
    def disabled(self) -> bool:
        return self._status == ControlStatus.DISABLED

    @property
    def enabled(self) -> bool:
        return self._status != ControlStatus.DISABLED

    @property
    def pristine(self) -> bool:
        return self._pristine

    @property
    def dirty(self) -> bool:
        return not self._pristine

    @property
    def touched(self) -> bool:
        return self._touched

    @property
    def untouched(self) -> bool:
        return not self._touched

    @property
    def parent(self) -> Optional["AbstractControl"]:
        return self._parent

    @property
    def root(self) -> "AbstractControl":
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    @property
    def update_on(self) -> UpdateOn:
        """Own strategy, else the nearest ancestor's, else the configured default."""
        if self._update_on is not None:
            return self._update_on
        if self._parent is not None:
            return self._parent.update_on
        return UpdateOn(get_form_config().default_update_on)

    # ========== NOTIFICATION STREAMS ==========

    @property
    def value_changed(self):
        return self._events.value_changed

    @property
    def status_changed(self):
        return self._events.status_changed

    @property
    def touched_changed(self):
        return self._events.touched_changed

    @property
    def pristine_changed(self):
        return self._events.pristine_changed

    # ========== VALIDATORS ==========

    @property
    def validator(self) -> Optional[Callable]:
        """Composed synchronous validator, None when there is none."""
        return self._validators.composed

    @validator.setter
    def validator(self, validators) -> None:
        self._validators.set(validators)

    @property
    def async_validator(self) -> Optional[Callable]:
        """Composed async validator, None when there is none."""
        return self._async_validators.composed

    @async_validator.setter
    def async_validator(self, validators) -> None:
        self._async_validators.set(validators)

    @property
    def validator_set(self) -> ValidatorSet:
        return self._validators

    @property
    def async_validator_set(self) -> ValidatorSet:
        return self._async_validators

    def set_validators(self, validators) -> None:
        """Replace the sync validators. Takes effect on the next validity update."""
        self._validators.set(validators)

    def set_async_validators(self, validators) -> None:
        self._async_validators.set(validators)

    def add_validators(self, validators) -> None:
        self._validators.add(validators)

    def add_async_validators(self, validators) -> None:
        self._async_validators.add(validators)

    def remove_validators(self, validators) -> None:
        self._validators.remove(validators)

    def remove_async_validators(self, validators) -> None:
        self._async_validators.remove(validators)

    def has_validator(self, validator: Callable) -> bool:
        return self._validators.has(validator)

    def has_async_validator(self, validator: Callable) -> bool:
        return self._async_validators.has(validator)

    def clear_validators(self) -> None:
        self._validators.clear()

    def clear_async_validators(self) -> None:
        self._async_validators.clear()

    # ========== INTERACTION FLAGS ==========

    def mark_as_touched(self, only_self: bool = False, emit_event: bool = True) -> None:
        """Mark this node and all descendants touched, then re-aggregate ancestors."""
        self._set_touched(True, emit_event)
        self._for_each_child(lambda control, _: control.mark_as_touched(only_self=True, emit_event=emit_event))
        if self._parent is not None and not only_self:
            self._parent._update_touched(emit_event=emit_event)

    def mark_as_untouched(self, only_self: bool = False, emit_event: bool = True) -> None:
        self._set_touched(False, emit_event)
        self._pending_touched = False
        self._for_each_child(lambda control, _: control.mark_as_untouched(only_self=True, emit_event=emit_event))
        if self._parent is not None and not only_self:
            self._parent._update_touched(emit_event=emit_event)

    def mark_as_dirty(self, only_self: bool = False, emit_event: bool = True) -> None:
        """Mark this node and all descendants dirty, then re-aggregate ancestors."""
        self._set_pristine(False, emit_event)
        self._for_each_child(lambda control, _: control.mark_as_dirty(only_self=True, emit_event=emit_event))
        if self._parent is not None and not only_self:
            self._parent._update_pristine(emit_event=emit_event)

    def mark_as_pristine(self, only_self: bool = False, emit_event: bool = True) -> None:
        self._set_pristine(True, emit_event)
        self._pending_dirty = False
        self._for_each_child(lambda control, _: control.mark_as_pristine(only_self=True, emit_event=emit_event))
        if self._parent is not None and not only_self:
            self._parent._update_pristine(emit_event=emit_event)

    def mark_as_pending(self, only_self: bool = False, emit_event: bool = True) -> None:
        self._status = ControlStatus.PENDING
        if emit_event:
            self._events.status_changed.emit(self._status)
        if self._parent is not None and not only_self:
            self._parent.mark_as_pending(emit_event=emit_event)

    def _set_touched(self, touched: bool, emit_event: bool) -> None:
        if self._touched != touched:
            self._touched = touched
            if emit_event:
                self._events.touched_changed.emit(touched)

    def _set_pristine(self, pristine: bool, emit_event: bool) -> None:
        if self._pristine != pristine:
            self._pristine = pristine
            if emit_event:
                self._events.pristine_changed.emit(pristine)

    def _update_touched(self, only_self: bool = False, emit_event: bool = True) -> None:
        self._set_touched(self._any_controls(lambda control: control.touched), emit_event)
        if self._parent is not None and not only_self:
            self._parent._update_touched(emit_event=emit_event)

    def _update_pristine(self, only_self: bool = False, emit_event: bool = True) -> None:
        self._set_pristine(not self._any_controls(lambda control: control.dirty), emit_event)
        if self._parent is not None and not only_self:
            self._parent._update_pristine(emit_event=emit_event)

    # ========== ENABLE / DISABLE ==========

    def disable(self, only_self: bool = False, emit_event: bool = True) -> None:
        """
        Disable this node and every descendant.

        A disabled node has no errors, is excluded from its parent's value and
        from aggregate validity. In-flight async validation is superseded.
        """
        self._cancel_pending_validation()
        self._status = ControlStatus.DISABLED
        self._errors = None
        self._for_each_child(lambda control, _: control.disable(only_self=True, emit_event=emit_event))
        self._update_value()

        if emit_event:
            self._events.value_changed.emit(self._value)
            self._events.status_changed.emit(self._status)

        self._update_ancestors(only_self, emit_event)
        for callback in list(self._on_disabled_change):
            callback(True)

    def enable(self, only_self: bool = False, emit_event: bool = True) -> None:
        """Re-enable this node and every descendant, then re-validate."""
        self._ensure_async_loop(only_self, include_disabled=True)
        self._status = ControlStatus.VALID
        self._for_each_child(lambda control, _: control.enable(only_self=True, emit_event=emit_event))
        self.update_value_and_validity(only_self=True, emit_event=emit_event)

        self._update_ancestors(only_self, emit_event)
        for callback in list(self._on_disabled_change):
            callback(False)

    def _update_ancestors(self, only_self: bool, emit_event: bool) -> None:
        if self._parent is not None and not only_self:
            self._parent.update_value_and_validity(emit_event=emit_event)
            self._parent._update_pristine(emit_event=emit_event)
            self._parent._update_touched(emit_event=emit_event)

    def register_on_disabled_change(self, callback: Callable[[bool], None]) -> None:
        self._on_disabled_change.append(callback)

    def _unregister_on_disabled_change(self, callback: Callable[[bool], None]) -> None:
        if callback in self._on_disabled_change:
            self._on_disabled_change.remove(callback)

    # ========== VALUE AND VALIDITY ==========

    def set_parent(self, parent: Optional["AbstractControl"]) -> None:
        self._parent = parent

    def update_value_and_validity(self, only_self: bool = False, emit_event: bool = True) -> None:
        """
        Recompute value, errors and status, then bubble to ancestors.

        Sync validators run first; the async validator only runs when they
        pass. A new run supersedes any in-flight async validation of this node.

        Args:
            only_self: Do not re-aggregate ancestors
            emit_event: Emit value_changed/status_changed once done
        """
        self._ensure_async_loop(only_self, subtree=False)
        self._set_initial_status()
        self._update_value()

        if self.enabled:
            self._cancel_pending_validation()
            self._errors = self._run_validator()
            self._status = self._calculate_status()
            if self._status in (ControlStatus.VALID, ControlStatus.PENDING):
                self._run_async_validator(emit_event)

        if self._parent is not None and not only_self:
            self._parent.update_value_and_validity(emit_event=emit_event)

        if emit_event:
            self._events.value_changed.emit(self._value)
            self._events.status_changed.emit(self._status)

    def _update_tree_validity(self, emit_event: bool = True) -> None:
        self._for_each_child(lambda control, _: control._update_tree_validity(emit_event=emit_event))
        self.update_value_and_validity(only_self=True, emit_event=emit_event)

    def _set_initial_status(self) -> None:
        self._status = ControlStatus.DISABLED if self._all_controls_disabled() else ControlStatus.VALID

    def _ensure_async_loop(self, only_self: bool = False, include_disabled: bool = False,
                           subtree: bool = True) -> None:
        """
        Raise before mutating anything if this write would start async validation without a loop.

        Covers this node (and its subtree unless subtree is False) and, unless
        only_self, every ancestor that re-validates.

        Raises:
            AsyncValidationError: If no asyncio event loop is running
        """
        if subtree:
            needs_loop = self._subtree_has_async_validator(include_disabled)
        else:
            needs_loop = self.enabled and self._async_validators.composed is not None
        parent = None if only_self else self._parent
        while parent is not None and not needs_loop:
            needs_loop = (include_disabled or parent.enabled) and parent._async_validators.composed is not None
            parent = parent._parent
        if needs_loop:
            running_loop()

    def _subtree_has_async_validator(self, include_disabled: bool) -> bool:
        if not include_disabled and self.disabled:
            return False
        if self._async_validators.composed is not None:
            return True
        found = []
        self._for_each_child(lambda control, _: found.append(control._subtree_has_async_validator(include_disabled)))
        return any(found)

    def _run_validator(self) -> Optional[ErrorMap]:
        validator = self._validators.composed
        return validator(self) if validator is not None else None

    def _run_async_validator(self, emit_event: bool) -> None:
        validator = self._async_validators.composed
        if validator is None:
            return
        running_loop()

        self._status = ControlStatus.PENDING
        self._async_pending = True
        self._validation_id += 1
        validation_id = self._validation_id

        future = to_future(validator(self))
        self._in_flight.add(future)
        future.add_done_callback(
            functools.partial(self._on_async_validation_done, validation_id, emit_event)
        )

    def _on_async_validation_done(self, validation_id: int, emit_event: bool, future: asyncio.Future) -> None:
        self._in_flight.discard(future)
        if validation_id != self._validation_id:
            logger.debug(f"Discarding stale async validation #{validation_id} (current #{self._validation_id})")
            return
        if future.cancelled():
            return

        # A failing validator raises here and reaches the loop's exception
        # handler; the node stays PENDING.
        errors = future.result()
        self._async_pending = False
        self.set_errors(errors, emit_event=emit_event)

    def _cancel_pending_validation(self) -> None:
        self._validation_id += 1
        self._async_pending = False

    def set_errors(self, errors: Optional[ErrorMap], emit_event: bool = True) -> None:
        """Set errors manually (or from an async result) and re-aggregate status upward."""
        self._errors = errors
        self._update_controls_errors(emit_event)

    def _update_controls_errors(self, emit_event: bool) -> None:
        self._status = self._calculate_status()
        if emit_event:
            self._events.status_changed.emit(self._status)
        if self._parent is not None:
            self._parent._update_controls_errors(emit_event)

    def _calculate_status(self) -> ControlStatus:
        if self._all_controls_disabled():
            return ControlStatus.DISABLED
        if self._errors:
            return ControlStatus.INVALID
        if self._any_controls(lambda control: control.status == ControlStatus.INVALID):
            return ControlStatus.INVALID
        if self._async_pending or self._any_controls(lambda control: control.status == ControlStatus.PENDING):
            return ControlStatus.PENDING
        return ControlStatus.VALID

    # ========== LOOKUP ==========

    def get(self, path: PathLike) -> Optional["AbstractControl"]:
        """
        Find a descendant by path.

        Args:
            path: Dotted string ("address.lines.0"), a single key/index, or a
                sequence of keys/indexes

        Returns:
            The control, or None if any segment does not resolve
        """
        if path is None:
            return None
        if isinstance(path, str):
            parts: List[Union[str, int]] = path.split(".")
        elif isinstance(path, int):
            parts = [path]
        else:
            parts = list(path)
        if not parts:
            return None

        control: Optional[AbstractControl] = self
        for name in parts:
            if control is None:
                return None
            control = control._find_child(name)
        return control

    def get_error(self, error_code: str, path: Optional[PathLike] = None) -> Any:
        control = self.get(path) if path is not None else self
        if control is None or not control.errors:
            return None
        return control.errors.get(error_code)

    def has_error(self, error_code: str, path: Optional[PathLike] = None) -> bool:
        control = self.get(path) if path is not None else self
        return bool(control is not None and control.errors and error_code in control.errors)

    def _register_on_collection_change(self, callback: Callable[[], None]) -> None:
        self._on_collection_change = callback

    # ========== SUBCLASS CONTRACT ==========

    @abstractmethod
    def set_value(self, value: Any, only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        pass

    @abstractmethod
    def patch_value(self, value: Any, only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        pass

    @abstractmethod
    def reset(self, value: Any = UNSET, only_self: bool = False, emit_event: bool = True) -> None:
        pass

    @abstractmethod
    def get_raw_value(self) -> Any:
        """Value including disabled descendants."""
        pass

    @abstractmethod
    def _update_value(self) -> None:
        pass

    @abstractmethod
    def _for_each_child(self, callback: Callable[["AbstractControl", Any], None]) -> None:
        pass

    @abstractmethod
    def _any_controls(self, condition: Callable[["AbstractControl"], bool]) -> bool:
        """True if any enabled direct child satisfies condition."""
        pass

    @abstractmethod
    def _all_controls_disabled(self) -> bool:
        pass

    @abstractmethod
    def _find_child(self, name: Union[str, int]) -> Optional["AbstractControl"]:
        pass

    @abstractmethod
    def _sync_pending_controls(self) -> bool:
        """Apply pending view values of submit-strategy controls. Returns True if any changed."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(value={self._value!r}, status={self._status.value})"
