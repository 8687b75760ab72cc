"""Keyed composite: named children aggregated into a mapping value."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Union

from pyqt_formbind.errors import ControlStructureError
from pyqt_formbind.model.abstract_control import UNSET, AbstractControl
from pyqt_formbind.model.status import UpdateOn

logger = logging.getLogger(__name__)


class FormGroup(AbstractControl):
    """
    Named children; value is the mapping of every enabled child's value.

    Examples:
        address = FormGroup({
            "street": FormControl("", Validators.required),
            "zip": FormControl("", Validators.pattern(r"\\d{5}")),
        })
        address.get("street").set_value("Main St")
        address.value  # {"street": "Main St", "zip": ""}

    The group is VALID only if every enabled child is VALID, PENDING if an
    enabled child is PENDING and none is INVALID, INVALID otherwise.
    """

    def __init__(self, controls: Optional[Mapping[str, AbstractControl]] = None, validators=None,
                 async_validators=None, *, update_on: Optional[Union[UpdateOn, str]] = None):
        super().__init__(validators, async_validators, update_on)
        self.controls: Dict[str, AbstractControl] = dict(controls or {})
        self._set_up_controls()
        self.update_value_and_validity(only_self=True, emit_event=False)

    # ========== STRUCTURE ==========

    def register_control(self, name: str, control: AbstractControl) -> AbstractControl:
        """
        Attach control under name unless the name is taken.

        Re-aggregates this group without emitting events and does not fire
        the collection-change hook (add_control does).

        Returns:
            The control now registered under name (the existing one if taken)
        """
        existing = self.controls.get(name)
        if existing is not None:
            return existing
        self.controls[name] = control
        control.set_parent(self)
        control._register_on_collection_change(self._on_collection_change)
        logger.debug(f"Registered control '{name}' in {type(self).__name__}")
        self.update_value_and_validity(emit_event=False)
        return control

    def add_control(self, name: str, control: AbstractControl, emit_event: bool = True) -> None:
        self.register_control(name, control)
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def remove_control(self, name: str, emit_event: bool = True) -> None:
        control = self.controls.pop(name, None)
        if control is not None:
            control._register_on_collection_change(lambda: None)
            control.set_parent(None)
            logger.debug(f"Removed control '{name}' from {type(self).__name__}")
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def set_control(self, name: str, control: Optional[AbstractControl], emit_event: bool = True) -> None:
        """Replace (or with None, remove) the control registered under name."""
        existing = self.controls.pop(name, None)
        if existing is not None:
            existing._register_on_collection_change(lambda: None)
            existing.set_parent(None)
        if control is not None:
            self.register_control(name, control)
        self.update_value_and_validity(emit_event=emit_event)
        self._on_collection_change()

    def contains(self, name: str) -> bool:
        """True if an enabled control is registered under name."""
        control = self.controls.get(name)
        return control is not None and control.enabled

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        return len(self.controls)

    # ========== VALUE ==========

    def set_value(self, value: Mapping[str, Any], only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        """
        Set every child's value.

        Raises:
            ControlStructureError: If value is not a mapping, misses a child
                key or names a child that does not exist
        """
        if not isinstance(value, Mapping):
            raise ControlStructureError(
                f"Expected a mapping to set the value of a form group, but received {type(value).__name__}"
            )
        self._check_all_values_present(value)
        for name in value:
            self._throw_if_control_missing(name)
        self._ensure_async_loop(only_self)
        for name, child_value in value.items():
            self.controls[name].set_value(child_value, only_self=True, emit_event=emit_event, **kwargs)
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def patch_value(self, value: Optional[Mapping[str, Any]], only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        """Set the values of the children named in value; unknown keys are ignored."""
        if value is None:
            return
        self._ensure_async_loop(only_self)
        for name, child_value in value.items():
            control = self.controls.get(name)
            if control is not None:
                control.patch_value(child_value, only_self=True, emit_event=emit_event, **kwargs)
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def reset(self, value: Any = UNSET, only_self: bool = False, emit_event: bool = True) -> None:
        """Reset every child, to value[name] when given, else to its own default."""
        self._ensure_async_loop(only_self)
        values = value if isinstance(value, Mapping) else {}
        self._for_each_child(
            lambda control, name: control.reset(values.get(name, UNSET), only_self=True, emit_event=emit_event)
        )
        self._update_pristine(only_self=only_self, emit_event=emit_event)
        self._update_touched(only_self=only_self, emit_event=emit_event)
        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def get_raw_value(self) -> Dict[str, Any]:
        return {name: control.get_raw_value() for name, control in self.controls.items()}

    def _sync_pending_controls(self) -> bool:
        updated = False
        for control in list(self.controls.values()):
            if control._sync_pending_controls():
                updated = True
        if updated:
            self.update_value_and_validity(only_self=True)
        return updated

    # ========== INTERNALS ==========

    def _check_all_values_present(self, value: Mapping[str, Any]) -> None:
        for name in self.controls:
            if name not in value:
                raise ControlStructureError(f"Must supply a value for form control with name: '{name}'.")

    def _throw_if_control_missing(self, name: str) -> None:
        if not self.controls:
            raise ControlStructureError(
                "There are no form controls registered with this group yet. If you are using "
                "template-driven bindings, check again after the microtask queue has been flushed."
            )
        if name not in self.controls:
            raise ControlStructureError(f"Cannot find form control with name: {name}.")

    def _set_up_controls(self) -> None:
        for control in self.controls.values():
            control.set_parent(self)
            control._register_on_collection_change(self._on_collection_change)

    def _for_each_child(self, callback: Callable[[AbstractControl, Any], None]) -> None:
        for name, control in list(self.controls.items()):
            callback(control, name)

    def _update_value(self) -> None:
        # a fully disabled group still reports every child's value
        self._value = {
            name: control.value
            for name, control in self.controls.items()
            if control.enabled or self.disabled
        }

    def _any_controls(self, condition) -> bool:
        return any(control.enabled and condition(control) for control in self.controls.values())

    def _all_controls_disabled(self) -> bool:
        if any(control.enabled for control in self.controls.values()):
            return False
        return bool(self.controls) or self.disabled

    def _find_child(self, name) -> Optional[AbstractControl]:
        return self.controls.get(str(name))
