"""
Directive-binding protocol.

Plain functions that wire a control node to a directive and unwire it again:
validators merged into the control, the view→model, model→view, blur and
disabled pipelines, value accessor selection and submit-time
synchronization of pending view values.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Iterable, List, Optional, Sequence

from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model.status import UpdateOn
from pyqt_formbind.protocols.validator_protocols import AsyncValidatorDirective, ValidatorDirective
from pyqt_formbind.protocols.value_accessor import (
    AccessorKind, ControlValueAccessor, DisabledStateCapable
)

if TYPE_CHECKING:
    from pyqt_formbind.directives.abstract_directives import (
        AbstractControlDirective, ControlContainer, ControlDirective
    )
    from pyqt_formbind.model.abstract_control import AbstractControl
    from pyqt_formbind.model.form_control import FormControl
    from pyqt_formbind.model.form_group import FormGroup

logger = logging.getLogger(__name__)


# ========== ERRORS ==========

def throw_error(directive: "AbstractControlDirective", message: str) -> None:
    """
    Raise a FormConfigurationError naming the directive's location.

    The message ends with ``path: 'a -> b'`` for nested directives,
    ``name: 'a'`` for a top-level name, or ``unspecified name attribute``.
    """
    path = directive.path or []
    if len(path) > 1:
        message_end = f"path: '{' -> '.join(str(p) for p in path)}'"
    elif path and path[0]:
        message_end = f"name: '{path[0]}'"
    else:
        message_end = "unspecified name attribute"
    raise FormConfigurationError(f"{message} {message_end}")


def control_path(name: Optional[str], parent: "ControlContainer") -> List[Any]:
    return [*(parent.path or []), name]


# ========== CONTROL SET-UP / CLEAN-UP ==========

def set_up_control(control: Optional["FormControl"], directive: "ControlDirective") -> None:
    """
    Link a leaf control and its directive.

    Merges the directive's validators into the control, writes the current
    value into the widget and installs the view→model, model→view, blur and
    disabled pipelines.

    Raises:
        FormConfigurationError: If control is None or the directive has no
            value accessor
    """
    if control is None:
        throw_error(directive, "Cannot find control with")
    if directive.value_accessor is None:
        throw_error(directive, "No value accessor for form control with")

    directive.value_accessor.on_attach(directive)
    set_up_validators(control, directive, handle_on_validator_change=True)
    directive.value_accessor.write_value(control.value)
    _set_up_view_change_pipeline(control, directive)
    _set_up_model_change_pipeline(control, directive)
    _set_up_blur_pipeline(control, directive)
    set_up_disabled_change_handler(control, directive)
    logger.debug(f"Bound {type(directive).__name__} {directive.path} to {directive.value_accessor!r}")


def clean_up_control(control: Optional["FormControl"], directive: "ControlDirective",
                     validate_control_presence_on_change: bool = True) -> None:
    """
    Revert set_up_control().

    Args:
        control: The control previously bound, or None if it vanished
        directive: The directive being released
        validate_control_presence_on_change: Report later widget edits that
            no longer reach any control
    """
    accessor = directive.value_accessor
    if accessor is not None:
        accessor.on_detach()

        def _detached(*_):
            if validate_control_presence_on_change:
                # raising inside a Qt slot would abort the application
                logger.warning(
                    f"There is no control attached to form control element with path {directive.path}"
                )

        accessor.register_on_change(_detached)
        accessor.register_on_touched(_detached)

    clean_up_validators(control, directive, handle_on_validator_change=True)
    if control is not None:
        directive._invoke_on_destroy_callbacks()
        control._register_on_collection_change(lambda: None)


def set_up_disabled_change_handler(control: "FormControl", directive: "ControlDirective") -> None:
    """Mirror the control's disabled flag onto the widget, if the accessor supports it."""
    accessor = directive.value_accessor
    if not isinstance(accessor, DisabledStateCapable):
        return

    def on_disabled_change(disabled: bool) -> None:
        accessor.set_disabled_state(disabled)

    control.register_on_disabled_change(on_disabled_change)
    directive._register_on_destroy(lambda: control._unregister_on_disabled_change(on_disabled_change))


# ========== VALIDATORS ==========

def _register_on_validator_change(validators: Iterable[Any], callback: Callable[[], None]) -> None:
    for validator in validators:
        if isinstance(validator, (ValidatorDirective, AsyncValidatorDirective)):
            validator.register_on_validator_change(callback)


def set_up_validators(control: "AbstractControl", directive: "AbstractControlDirective",
                      handle_on_validator_change: bool) -> None:
    """
    Merge the directive's composed validators into the control's.

    With handle_on_validator_change, validator directives re-validate the
    control whenever one of their inputs changes.
    """
    if directive.validator is not None:
        control.add_validators(directive.validator)
    if directive.async_validator is not None:
        control.add_async_validators(directive.async_validator)

    if handle_on_validator_change:
        def on_validator_change() -> None:
            control.update_value_and_validity()

        _register_on_validator_change(directive._raw_validators, on_validator_change)
        _register_on_validator_change(directive._raw_async_validators, on_validator_change)


def clean_up_validators(control: Optional["AbstractControl"], directive: "AbstractControlDirective",
                        handle_on_validator_change: bool) -> bool:
    """
    Remove the directive's validators from the control.

    Returns:
        True if the control's validator lists changed
    """
    updated = False
    if control is not None:
        if directive.validator is not None:
            generation = control.validator_set.generation
            control.remove_validators(directive.validator)
            updated = control.validator_set.generation != generation
        if directive.async_validator is not None:
            generation = control.async_validator_set.generation
            control.remove_async_validators(directive.async_validator)
            updated = updated or control.async_validator_set.generation != generation

    if handle_on_validator_change:
        _register_on_validator_change(directive._raw_validators, lambda: None)
        _register_on_validator_change(directive._raw_async_validators, lambda: None)
    return updated


def set_up_form_container(control: Optional["AbstractControl"], directive: "ControlContainer") -> None:
    """Link a group/array control and its container directive (validators only)."""
    if control is None:
        throw_error(directive, "Cannot find control with")
    set_up_validators(control, directive, handle_on_validator_change=False)


def clean_up_form_container(control: Optional["AbstractControl"], directive: "ControlContainer") -> bool:
    return clean_up_validators(control, directive, handle_on_validator_change=False)


# ========== PIPELINES ==========

def _set_up_view_change_pipeline(control: "FormControl", directive: "ControlDirective") -> None:
    def on_view_change(new_value: Any) -> None:
        control._pending_value = new_value
        control._pending_change = True
        control._pending_dirty = True
        if control.update_on == UpdateOn.CHANGE:
            update_control(control, directive)

    directive.value_accessor.register_on_change(on_view_change)


def _set_up_blur_pipeline(control: "FormControl", directive: "ControlDirective") -> None:
    def on_touched() -> None:
        control._pending_touched = True
        if control.update_on == UpdateOn.BLUR and control._pending_change:
            update_control(control, directive)
        if control.update_on != UpdateOn.SUBMIT:
            control.mark_as_touched()

    directive.value_accessor.register_on_touched(on_touched)


def _set_up_model_change_pipeline(control: "FormControl", directive: "ControlDirective") -> None:
    def on_model_change(new_value: Any, emit_model_event: bool) -> None:
        directive.value_accessor.write_value(new_value)
        if emit_model_event:
            directive.view_to_model_update(new_value)

    control.register_on_change(on_model_change)
    directive._register_on_destroy(lambda: control._unregister_on_change(on_model_change))


def update_control(control: "FormControl", directive: "ControlDirective") -> None:
    """Apply the pending view value to the model."""
    if control._pending_dirty:
        control.mark_as_dirty()
    control.set_value(control._pending_value, emit_model_to_view_change=False)
    directive.view_to_model_update(control._pending_value)
    control._pending_change = False


def sync_pending_controls(form: "FormGroup", directives: Sequence["ControlDirective"]) -> None:
    """Copy the pending view value of every submit-strategy control into the model."""
    form._sync_pending_controls()
    for directive in directives:
        control = directive.control
        if control is not None and control.update_on == UpdateOn.SUBMIT and control._pending_change:
            directive.view_to_model_update(control._pending_value)
            control._pending_change = False


# ========== ACCESSOR SELECTION ==========

def select_value_accessor(directive: "ControlDirective",
                          value_accessors: Optional[Sequence[ControlValueAccessor]]) -> Optional[ControlValueAccessor]:
    """
    Pick the accessor a directive binds through.

    A CUSTOM accessor wins over a BUILTIN one, which wins over the DEFAULT.

    Raises:
        FormConfigurationError: If more than one custom, or more than one
            built-in, accessor matches
    """
    if not value_accessors:
        return None

    default_accessor = builtin_accessor = custom_accessor = None
    for accessor in value_accessors:
        if accessor.accessor_kind == AccessorKind.DEFAULT:
            default_accessor = accessor
        elif accessor.accessor_kind == AccessorKind.BUILTIN:
            if builtin_accessor is not None:
                throw_error(directive, "More than one built-in value accessor matches form control with")
            builtin_accessor = accessor
        else:
            if custom_accessor is not None:
                throw_error(directive, "More than one custom value accessor matches form control with")
            custom_accessor = accessor

    selected = next(
        (a for a in (custom_accessor, builtin_accessor, default_accessor) if a is not None), None
    )
    logger.debug(f"Selected {selected!r} out of {len(value_accessors)} accessor(s)")
    return selected
