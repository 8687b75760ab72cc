"""
Template-driven directives.

The directives create their own controls. Registration of every control and
group with its parent is deferred to the microtask queue, so all sibling
directives of a widget tree exist before any of them is attached:

    form_dir = TemplateFormDirective()
    address = ModelGroupDirective("address", form_dir)
    street = ModelDirective("street", address, street_edit, validators=[RequiredValidator()])
    flush_microtasks()            # or let the event loop drain the queue
    form_dir.form.value           # {"address": {"street": ""}}
"""

import logging
from typing import Any, Optional, Sequence, Union

from PyQt6.QtWidgets import QWidget

from pyqt_formbind.core.microtask_queue import MicrotaskQueue, get_microtask_queue
from pyqt_formbind.directives.abstract_directives import (
    AbstractFormDirective, ContainerKind, ControlContainer, ControlDirective
)
from pyqt_formbind.directives.shared import set_up_control, set_up_form_container, throw_error
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model.abstract_control import UNSET
from pyqt_formbind.model.form_control import FormControl
from pyqt_formbind.model.form_group import FormGroup
from pyqt_formbind.model.status import UpdateOn
from pyqt_formbind.protocols.value_accessor import ControlValueAccessor

logger = logging.getLogger(__name__)


class TemplateFormDirective(AbstractFormDirective):
    """
    Root of a template-driven form. Owns a FormGroup built from the
    directives declared under it.

    Args:
        validators: Sync validators (or validator directives) for the form group
        async_validators: Async validators for the form group
        update_on: Default update strategy of every control in the form
        queue: Microtask queue used for registration (the shared one by default)
    """

    container_kind = ContainerKind.TEMPLATE_FORM

    def __init__(self, validators=None, async_validators=None,
                 update_on: Optional[Union[UpdateOn, str]] = None,
                 queue: Optional[MicrotaskQueue] = None):
        super().__init__()
        self._set_validators(validators)
        self._set_async_validators(async_validators)
        self._queue = queue if queue is not None else get_microtask_queue()
        self._form = FormGroup({}, self.validator, self.async_validator, update_on=update_on)

    @property
    def form(self) -> FormGroup:
        return self._form

    @property
    def controls(self):
        return self._form.controls

    @property
    def queue(self) -> MicrotaskQueue:
        return self._queue

    # ========== REGISTRATION (deferred) ==========

    def add_control(self, directive: "ModelDirective") -> None:
        def register() -> None:
            container = self._find_container(directive.path)
            directive._control = container.register_control(directive.name, directive._control)
            set_up_control(directive._control, directive)
            directive._control.update_value_and_validity(emit_event=False)
            self._directives.append(directive)

        self._queue.schedule(register)

    def get_control(self, directive: "ModelDirective") -> Optional[FormControl]:
        return self._form.get(directive.path)

    def remove_control(self, directive: "ModelDirective") -> None:
        def unregister() -> None:
            container = self._find_container(directive.path)
            if container is not None:
                container.remove_control(directive.name)
            if directive in self._directives:
                self._directives.remove(directive)

        self._queue.schedule(unregister)

    def add_form_group(self, directive: "ModelGroupDirective") -> None:
        def register() -> None:
            container = self._find_container(directive.path)
            group = FormGroup({})
            set_up_form_container(group, directive)
            container.register_control(directive.name, group)
            group.update_value_and_validity(emit_event=False)

        self._queue.schedule(register)

    def remove_form_group(self, directive: "ModelGroupDirective") -> None:
        def unregister() -> None:
            container = self._find_container(directive.path)
            if container is not None:
                container.remove_control(directive.name)

        self._queue.schedule(unregister)

    def get_form_group(self, directive: "ModelGroupDirective") -> Optional[FormGroup]:
        return self._form.get(directive.path)

    def update_model(self, directive: ControlDirective, value: Any) -> None:
        def write() -> None:
            self._form.get(directive.path).set_value(value)

        self._queue.schedule(write)

    def _find_container(self, path: Sequence[Any]) -> Optional[FormGroup]:
        parent_path = list(path)[:-1]
        return self._form.get(parent_path) if parent_path else self._form


class ModelGroupDirective(ControlContainer):
    """
    Nested group inside a template-driven form.

    Raises:
        FormConfigurationError: If parent is not a template-driven form or group
    """

    container_kind = ContainerKind.TEMPLATE_GROUP

    def __init__(self, name: str, parent: ControlContainer, validators=None, async_validators=None):
        super().__init__(name, parent)
        self._set_validators(validators)
        self._set_async_validators(async_validators)
        self._check_parent_type()
        self.form_directive.add_form_group(self)

    @property
    def control(self) -> Optional[FormGroup]:
        return self.form_directive.get_form_group(self)

    def destroy(self) -> None:
        if self.form_directive is not None:
            self.form_directive.remove_form_group(self)

    def _check_parent_type(self) -> None:
        if self._parent is None or not self._parent.container_kind.is_template:
            raise FormConfigurationError(
                "ModelGroupDirective must be nested in a TemplateFormDirective or another "
                "ModelGroupDirective; it cannot be used under reactive form directives."
            )


class ModelDirective(ControlDirective):
    """
    Leaf directive of a template-driven form, or a standalone binding.

    Without a parent (or with standalone=True) the directive owns its control
    and binds it immediately. Otherwise the control is registered under name
    in the parent container once the microtask queue drains.

    Model writes (set_model) and disabled toggles (set_disabled) are also
    deferred, and model writes leave the control pristine.

    Raises:
        FormConfigurationError: If the parent is not template-driven, or name
            is missing for a non-standalone directive
    """

    def __init__(self, name: Optional[str] = None, parent: Optional[ControlContainer] = None,
                 widget: Optional[QWidget] = None, *, model: Any = UNSET,
                 disabled: Optional[bool] = None, standalone: bool = False,
                 update_on: Optional[Union[UpdateOn, str]] = None, validators=None,
                 async_validators=None,
                 value_accessors: Optional[Sequence[ControlValueAccessor]] = None,
                 queue: Optional[MicrotaskQueue] = None):
        super().__init__(name, parent, widget, validators, async_validators, value_accessors)
        self.standalone = standalone
        self._control = FormControl()
        self._update_on = update_on
        self._queue = queue if queue is not None else self._default_queue()

        self._check_for_errors()
        self._set_up_control()
        if disabled is not None:
            self.set_disabled(disabled)
        if model is not UNSET:
            self.set_model(model)

    @property
    def control(self) -> FormControl:
        return self._control

    @property
    def is_standalone(self) -> bool:
        return self._parent is None or self.standalone

    def set_model(self, model: Any) -> None:
        """Push a model value into the control on the next microtask."""
        if not self._is_model_updated(model):
            return
        self.view_model = model

        def write() -> None:
            self._control.set_value(model, emit_view_to_model_change=False, mark_dirty=False)

        self._queue.schedule(write)

    def set_disabled(self, disabled: bool) -> None:
        def toggle() -> None:
            if disabled and not self._control.disabled:
                self._control.disable()
            elif not disabled and self._control.disabled:
                self._control.enable()

        self._queue.schedule(toggle)

    def destroy(self) -> None:
        if not self.is_standalone and self.form_directive is not None:
            self.form_directive.remove_control(self)

    def _default_queue(self) -> MicrotaskQueue:
        form_directive = self.form_directive
        if isinstance(form_directive, TemplateFormDirective):
            return form_directive.queue
        return get_microtask_queue()

    def _set_up_control(self) -> None:
        if self._update_on is not None:
            self._control._update_on = UpdateOn(self._update_on)
        if self.is_standalone:
            set_up_control(self._control, self)
            self._control.update_value_and_validity(emit_event=False)
        else:
            self.form_directive.add_control(self)

    def _check_for_errors(self) -> None:
        if self.is_standalone:
            return
        if not self._parent.container_kind.is_template:
            raise FormConfigurationError(
                "ModelDirective cannot register controls with a reactive parent directive. "
                "Use FormControlNameDirective under FormGroupDirective, FormGroupNameDirective "
                "or FormArrayNameDirective instead."
            )
        if not self.name:
            throw_error(
                self,
                "ModelDirective inside a TemplateFormDirective needs a name, or standalone=True, for control with",
            )
