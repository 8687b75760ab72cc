"""
Reactive directives.

The caller builds the control tree; directives only look controls up by
path and bind widgets to them, synchronously:

    form = FormGroup({"name": FormControl(""), "tags": FormArray([FormControl("a")])})
    form_dir = FormGroupDirective(form)
    FormControlNameDirective("name", form_dir, name_edit)
    tags = FormArrayNameDirective("tags", form_dir)
    FormControlNameDirective("0", tags, first_tag_edit)
"""

import logging
from typing import Any, Optional, Sequence

from PyQt6.QtWidgets import QWidget

from pyqt_formbind.directives.abstract_directives import (
    AbstractFormDirective, ContainerKind, ControlContainer, ControlDirective
)
from pyqt_formbind.directives.shared import (
    clean_up_control, clean_up_form_container, clean_up_validators, set_up_control,
    set_up_form_container, set_up_validators
)
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model.abstract_control import UNSET, AbstractControl
from pyqt_formbind.model.form_array import FormArray
from pyqt_formbind.model.form_control import FormControl
from pyqt_formbind.model.form_group import FormGroup
from pyqt_formbind.protocols.value_accessor import ControlValueAccessor, DisabledStateCapable

logger = logging.getLogger(__name__)


def _sync_disabled_state(directive: ControlDirective, control: AbstractControl) -> None:
    if control.disabled and isinstance(directive.value_accessor, DisabledStateCapable):
        directive.value_accessor.set_disabled_state(True)


class FormGroupDirective(AbstractFormDirective):
    """
    Binds an existing FormGroup to a widget tree.

    Assigning a new group to ``form`` re-binds every registered leaf
    directive; adding or removing controls in the bound group does the same.

    Raises:
        FormConfigurationError: If no FormGroup is supplied
    """

    container_kind = ContainerKind.REACTIVE_FORM

    def __init__(self, form: Optional[FormGroup], validators=None, async_validators=None):
        super().__init__()
        self._set_validators(validators)
        self._set_async_validators(async_validators)
        self._form: Optional[FormGroup] = None
        self.form = form

    @property
    def form(self) -> FormGroup:
        return self._form

    @form.setter
    def form(self, form: Optional[FormGroup]) -> None:
        self._check_form_present(form)
        if form is self._form:
            return
        old_form, self._form = self._form, form

        set_up_validators(form, self, handle_on_validator_change=False)
        if old_form is not None:
            clean_up_validators(old_form, self, handle_on_validator_change=False)
        self._update_dom_value()
        form._register_on_collection_change(self._update_dom_value)
        if old_form is not None:
            old_form._register_on_collection_change(lambda: None)
            self.control_changed.emit(form)

    # ========== LEAF REGISTRATION ==========

    def add_control(self, directive: ControlDirective) -> Optional[FormControl]:
        control = self._form.get(directive.path)
        set_up_control(control, directive)
        control.update_value_and_validity(emit_event=False)
        self._directives.append(directive)
        return control

    def get_control(self, directive: ControlDirective) -> Optional[AbstractControl]:
        return self._form.get(directive.path)

    def remove_control(self, directive: ControlDirective) -> None:
        clean_up_control(directive.control, directive, validate_control_presence_on_change=False)
        if directive in self._directives:
            self._directives.remove(directive)

    def update_model(self, directive: ControlDirective, value: Any) -> None:
        self._form.get(directive.path).set_value(value, mark_dirty=False)

    # ========== CONTAINER REGISTRATION ==========

    def add_form_group(self, directive: ControlContainer) -> None:
        self._set_up_form_container(directive)

    def remove_form_group(self, directive: ControlContainer) -> None:
        self._clean_up_form_container(directive)

    def get_form_group(self, directive: ControlContainer) -> Optional[FormGroup]:
        return self._form.get(directive.path)

    def add_form_array(self, directive: ControlContainer) -> None:
        self._set_up_form_container(directive)

    def remove_form_array(self, directive: ControlContainer) -> None:
        self._clean_up_form_container(directive)

    def get_form_array(self, directive: ControlContainer) -> Optional[FormArray]:
        return self._form.get(directive.path)

    def destroy(self) -> None:
        if self._form is not None:
            clean_up_validators(self._form, self, handle_on_validator_change=False)
            self._form._register_on_collection_change(lambda: None)

    # ========== INTERNALS ==========

    def _update_dom_value(self) -> None:
        """Re-bind every leaf directive whose path now resolves to a different control."""
        for directive in list(self._directives):
            old_control = directive.control
            new_control = self._form.get(directive.path)
            if old_control is not new_control:
                clean_up_control(old_control, directive)
                if isinstance(new_control, FormControl):
                    set_up_control(new_control, directive)
                    directive._control = new_control
                logger.debug(f"Re-bound {type(directive).__name__} {directive.path}")
                directive.control_changed.emit(directive.control)
        self._form._update_tree_validity(emit_event=False)

    def _set_up_form_container(self, directive: ControlContainer) -> None:
        control = self._form.get(directive.path)
        set_up_form_container(control, directive)
        control.update_value_and_validity(emit_event=False)

    def _clean_up_form_container(self, directive: ControlContainer) -> None:
        control = self._form.get(directive.path)
        if control is not None and clean_up_form_container(control, directive):
            control.update_value_and_validity(emit_event=False)

    @staticmethod
    def _check_form_present(form: Optional[FormGroup]) -> None:
        if form is None:
            raise FormConfigurationError(
                "FormGroupDirective expects a FormGroup instance. Please pass one in, e.g. "
                "FormGroupDirective(FormGroup({'first': FormControl(), 'last': FormControl()}))"
            )


class FormControlDirective(ControlDirective):
    """
    Binds a standalone FormControl to a widget.

    Assigning a new control to ``form`` releases the old one first.
    """

    def __init__(self, form: FormControl, widget: Optional[QWidget] = None, *, model: Any = UNSET,
                 validators=None, async_validators=None,
                 value_accessors: Optional[Sequence[ControlValueAccessor]] = None):
        super().__init__(None, None, widget, validators, async_validators, value_accessors)
        self._form: Optional[FormControl] = None
        self.form = form
        if model is not UNSET:
            self.set_model(model)

    @property
    def form(self) -> Optional[FormControl]:
        return self._form

    @form.setter
    def form(self, form: FormControl) -> None:
        if form is self._form:
            return
        previous = self._form
        if previous is not None:
            clean_up_control(previous, self, validate_control_presence_on_change=False)
        set_up_control(form, self)
        self._form = form
        _sync_disabled_state(self, form)
        form.update_value_and_validity(emit_event=False)
        if previous is not None:
            self.control_changed.emit(form)

    @property
    def control(self) -> Optional[FormControl]:
        return self._form

    @property
    def path(self):
        return []

    def set_model(self, model: Any) -> None:
        if self._is_model_updated(model):
            self._form.set_value(model, mark_dirty=False)
            self.view_model = model

    def destroy(self) -> None:
        if self._form is not None:
            clean_up_control(self._form, self, validate_control_presence_on_change=False)


def _check_reactive_parent(directive_name: str, parent: Optional[ControlContainer]) -> None:
    if parent is not None and parent.container_kind.is_reactive:
        return
    if parent is not None:
        raise FormConfigurationError(
            f"{directive_name} cannot be used under a template-driven parent. Use a "
            f"FormGroupDirective root, or ModelDirective inside TemplateFormDirective."
        )
    raise FormConfigurationError(
        f"{directive_name} must be used with a parent FormGroupDirective, "
        f"FormGroupNameDirective or FormArrayNameDirective."
    )


class FormControlNameDirective(ControlDirective):
    """
    Binds the FormControl found at ``name`` under a reactive parent to a widget.

    Raises:
        FormConfigurationError: If the parent is missing or not reactive, or
            no control exists at the path
    """

    def __init__(self, name: str, parent: ControlContainer, widget: Optional[QWidget] = None, *,
                 model: Any = UNSET, validators=None, async_validators=None,
                 value_accessors: Optional[Sequence[ControlValueAccessor]] = None):
        super().__init__(str(name), parent, widget, validators, async_validators, value_accessors)
        self._control: Optional[FormControl] = None
        _check_reactive_parent(type(self).__name__, parent)
        self._control = self.form_directive.add_control(self)
        _sync_disabled_state(self, self._control)
        if model is not UNSET:
            self.set_model(model)

    @property
    def control(self) -> Optional[FormControl]:
        return self._control

    def set_model(self, model: Any) -> None:
        if self._is_model_updated(model):
            self.view_model = model
            self.form_directive.update_model(self, model)

    def destroy(self) -> None:
        if self.form_directive is not None:
            self.form_directive.remove_control(self)


class FormGroupNameDirective(ControlContainer):
    """Nested FormGroup found at ``name`` under a reactive parent."""

    container_kind = ContainerKind.REACTIVE_GROUP

    def __init__(self, name: str, parent: ControlContainer, validators=None, async_validators=None):
        super().__init__(str(name), parent)
        self._set_validators(validators)
        self._set_async_validators(async_validators)
        _check_reactive_parent(type(self).__name__, parent)
        self.form_directive.add_form_group(self)

    @property
    def control(self) -> Optional[FormGroup]:
        return self.form_directive.get_form_group(self)

    def destroy(self) -> None:
        if self.form_directive is not None:
            self.form_directive.remove_form_group(self)


class FormArrayNameDirective(ControlContainer):
    """Nested FormArray found at ``name`` under a reactive parent."""

    container_kind = ContainerKind.REACTIVE_ARRAY

    def __init__(self, name: str, parent: ControlContainer, validators=None, async_validators=None):
        super().__init__(str(name), parent)
        self._set_validators(validators)
        self._set_async_validators(async_validators)
        _check_reactive_parent(type(self).__name__, parent)
        self.form_directive.add_form_array(self)

    @property
    def control(self) -> Optional[FormArray]:
        return self.form_directive.get_form_array(self)

    def destroy(self) -> None:
        if self.form_directive is not None:
            self.form_directive.remove_form_array(self)
