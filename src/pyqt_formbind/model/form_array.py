"""Indexed composite: ordered children aggregated into a list value."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Sequence, Union

from pyqt_formbind.errors import ControlStructureError
from pyqt_formbind.model.abstract_control import UNSET, AbstractControl
from pyqt_formbind.model.status import UpdateOn

logger = logging.getLogger(__name__)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


class FormArray(AbstractControl):
    """
    Ordered children; value is the list of enabled children's values.

    Examples:
        tags = FormArray([FormControl("a"), FormControl("b")])
        tags.push(FormControl("c"))
        tags.value  # ["a", "b", "c"]
    """

    def __init__(self, controls: Optional[Sequence[AbstractControl]] = None, validators=None,
                 async_validators=None, *, update_on: Optional[Union[UpdateOn, str]] = None):
        super().__init__(validators, async_validators, update_on)
        self.controls: List[AbstractControl] = list(controls or [])
        for control in self.controls:
            self._register_control(control)
        self.update_value_and_validity(only_self=True, emit_event=False)

    # ========== STRUCTURE ==========

    @property
    def length(self) -> int:
        return len(self.controls)

    def __len__(self) -> int:
        return len(self.controls)

    def at(self, index: int) -> AbstractControl:
        return self.controls[index]

    def push(self, control: AbstractControl, emit_event: bool = True) -> None:
        self.controls.append(control)
        self._register_control(control)
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def insert(self, index: int, control: AbstractControl, emit_event: bool = True) -> None:
        self.controls.insert(index, control)
        self._register_control(control)
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def remove_at(self, index: int, emit_event: bool = True) -> None:
        if -len(self.controls) <= index < len(self.controls):
            self._detach(self.controls.pop(index))
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def set_control(self, index: int, control: Optional[AbstractControl], emit_event: bool = True) -> None:
        """Replace (or with None, remove) the control at index."""
        if -len(self.controls) <= index < len(self.controls):
            self._detach(self.controls.pop(index))
        if control is not None:
            self.controls.insert(index, control)
            self._register_control(control)
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def clear(self, emit_event: bool = True) -> None:
        if not self.controls:
            return
        for control in self.controls:
            self._detach(control)
        self.controls = []
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    # ========== VALUE ==========

    def set_value(self, value: Sequence[Any], only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        """
        Set every child's value by position.

        Raises:
            ControlStructureError: If value is not a sequence or its length
                differs from the number of children
        """
        if not _is_sequence(value):
            raise ControlStructureError(
                f"Expected a sequence to set the value of a form array, but received {type(value).__name__}"
            )
        self._check_all_values_present(value)
        if len(value) > len(self.controls):
            self._throw_if_control_missing(len(self.controls))
        self._ensure_async_loop(only_self)
        for index, child_value in enumerate(value):
            self.controls[index].set_value(child_value, only_self=True, emit_event=emit_event, **kwargs)
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def patch_value(self, value: Optional[Sequence[Any]], only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        """Set values for the leading indexes present in value; extras are ignored."""
        if value is None:
            return
        self._ensure_async_loop(only_self)
        for index, child_value in enumerate(value):
            if index < len(self.controls):
                self.controls[index].patch_value(child_value, only_self=True, emit_event=emit_event, **kwargs)
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def reset(self, value: Any = UNSET, only_self: bool = False, emit_event: bool = True) -> None:
        self._ensure_async_loop(only_self)
        values = list(value) if _is_sequence(value) else []
        for index, control in enumerate(list(self.controls)):
            control.reset(values[index] if index < len(values) else UNSET, only_self=True, emit_event=emit_event)
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self._update_touched(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def get_raw_value(self) -> List[Any]:
        return [control.get_raw_value() for control in self.controls]

    def _sync_pending_controls(self) -> bool:
        updated = False
        for control in list(self.controls):
            if control._sync_pending_controls():
                updated = True
        if updated:
            self.update_value_and_validity(only_self=True)
        return updated

    # ========== INTERNALS ==========

    def _register_control(self, control: AbstractControl) -> None:
        control.set_parent(self)
        control._register_on_collection_change(self._on_collection_change)

    def _detach(self, control: AbstractControl) -> None:
        control._register_on_collection_change(lambda: None)
        control.set_parent(None)

    def _check_all_values_present(self, value: Sequence[Any]) -> None:
        for index in range(len(self.controls)):
            if index >= len(value):
                raise ControlStructureError(f"Must supply a value for form control at index: {index}.")

    def _throw_if_control_missing(self, index: int) -> None:
        if not self.controls:
            raise ControlStructureError(
                "There are no form controls registered with this array yet. If you are using "
                "template-driven bindings, check again after the microtask queue has been flushed."
            )
        if index >= len(self.controls):
            raise ControlStructureError(f"Cannot find form control at index {index}")

    def _for_each_child(self, callback: Callable[[AbstractControl, Any], None]) -> None:
        for index, control in enumerate(list(self.controls)):
            callback(control, index)

    def _update_value(self) -> None:
        self._value = [
            control.value for control in self.controls
            if control.enabled or self.disabled
        ]

    def _any_controls(self, condition) -> bool:
        return any(control.enabled and condition(control) for control in self.controls)

    def _all_controls_disabled(self) -> bool:
        if any(control.enabled for control in self.controls):
            return False
        return bool(self.controls) or self.disabled

    def _find_child(self, name) -> Optional[AbstractControl]:
        try:
            index = int(name)
        except (TypeError, ValueError):
            return None
        if 0 <= index < len(self.controls):
            return self.controls[index]
        return None
