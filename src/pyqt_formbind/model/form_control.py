"""Leaf control: a single value holder."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, Union

from pyqt_formbind.model.abstract_control import UNSET, AbstractControl, unbox_form_state
from pyqt_formbind.model.status import UpdateOn

logger = logging.getLogger(__name__)


class FormControl(AbstractControl):
    """
    Terminal value holder.

    Examples:
        name = FormControl("", Validators.required)
        age = FormControl(FormState(30, disabled=True))
        code = FormControl("", update_on="blur")

    reset() without arguments restores the value the control was created with.
    """

    def __init__(self, value: Any = None, validators=None, async_validators=None,
                 *, update_on: Optional[Union[UpdateOn, str]] = None):
        super().__init__(validators, async_validators, update_on)
        self._on_change: List[Callable[[Any, bool], None]] = []
        self._pending_value: Any = None
        self._pending_change = False

        self._apply_form_state(value)
        self._default_value = self._value
        self.update_value_and_validity(only_self=True, emit_event=False)

    def set_value(self, value: Any, only_self: bool = False, emit_event: bool = True,
                  emit_model_to_view_change: bool = True, emit_view_to_model_change: bool = True,
                  mark_dirty: bool = True) -> None:
        """
        Write a new value and re-validate.

        Args:
            value: New value
            only_self: Do not re-aggregate ancestors
            emit_event: Emit value_changed/status_changed
            emit_model_to_view_change: Push the value to bound views
            emit_view_to_model_change: Let bound directives report a model update
            mark_dirty: Any write makes the control dirty unless this is False
        """
        self._ensure_async_loop(only_self)
        self._value = self._pending_value = value
        if self._on_change and emit_model_to_view_change:
            for callback in list(self._on_change):
                callback(self._value, emit_view_to_model_change)

        if mark_dirty:
            self._set_pristine(False, emit_event)
            if self._parent is not None and not only_self:
                self._parent._update_pristine(emit_event=emit_event)

        self.update_value_and_validity(only_self=only_self, emit_event=emit_event)

    def patch_value(self, value: Any, only_self: bool = False, emit_event: bool = True, **kwargs) -> None:
        """Same as set_value() for a leaf."""
        self.set_value(value, only_self=only_self, emit_event=emit_event, **kwargs)

    def reset(self, value: Any = UNSET, only_self: bool = False, emit_event: bool = True) -> None:
        """Restore pristine/untouched and set value (default: the initial value)."""
        state = self._default_value if value is UNSET else value
        self._ensure_async_loop(only_self, include_disabled=unbox_form_state(state)[1] is False)
        self._apply_form_state(state)
        self.mark_as_pristine(only_self=only_self, emit_event=emit_event)
        self.mark_as_untouched(only_self=only_self, emit_event=emit_event)
        self.set_value(self._value, only_self=only_self, emit_event=emit_event, mark_dirty=False)
        self._pending_change = False

    def get_raw_value(self) -> Any:
        return self._value

    def register_on_change(self, callback: Callable[[Any, bool], None]) -> None:
        """Register a model→view callback, called as callback(value, emit_model_event)."""
        self._on_change.append(callback)

    def _unregister_on_change(self, callback: Callable[[Any, bool], None]) -> None:
        if callback in self._on_change:
            self._on_change.remove(callback)

    def _clear_change_fns(self) -> None:
        self._on_change = []
        self._on_disabled_change = []
        self._on_collection_change = lambda: None

    def _sync_pending_controls(self) -> bool:
        if self.update_on != UpdateOn.SUBMIT:
            return False
        if self._pending_dirty:
            self.mark_as_dirty()
        if self._pending_touched:
            self.mark_as_touched()
        if self._pending_change:
            self.set_value(self._pending_value, only_self=True, emit_model_to_view_change=False)
            return True
        return False

    def _apply_form_state(self, state: Any) -> None:
        value, disabled = unbox_form_state(state)
        self._value = self._pending_value = value
        if disabled is True:
            self.disable(only_self=True, emit_event=False)
        elif disabled is False:
            self.enable(only_self=True, emit_event=False)

    def _update_value(self) -> None:
        pass

    def _for_each_child(self, callback) -> None:
        pass

    def _any_controls(self, condition) -> bool:
        return False

    def _all_controls_disabled(self) -> bool:
        return self.disabled

    def _find_child(self, name) -> Optional[AbstractControl]:
        return None
