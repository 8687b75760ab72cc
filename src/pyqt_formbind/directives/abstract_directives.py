"""
Directive base classes.

A directive binds one widget (leaf directives) or one widget subtree
(container directives) to a control node. Containers carry a ContainerKind
tag; child directives check their parent's kind instead of its class.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Sequence

from PyQt6.QtCore import QObject, pyqtSignal
from PyQt6.QtWidgets import QAbstractButton, QWidget

from pyqt_formbind.accessors.registry import accessors_for_widget
from pyqt_formbind.directives.shared import (
    control_path, select_value_accessor, sync_pending_controls
)
from pyqt_formbind.model.abstract_control import UNSET, AbstractControl
from pyqt_formbind.model.status import ControlStatus
from pyqt_formbind.protocols.qt_abc import PyQtABCMeta
from pyqt_formbind.protocols.validator_protocols import normalize_validator
from pyqt_formbind.protocols.value_accessor import ControlValueAccessor
from pyqt_formbind.validation.composition import compose, compose_async

logger = logging.getLogger(__name__)


class ContainerKind(Enum):
    """Which directive family a container belongs to."""
    TEMPLATE_FORM = "template_form"
    TEMPLATE_GROUP = "template_group"
    REACTIVE_FORM = "reactive_form"
    REACTIVE_GROUP = "reactive_group"
    REACTIVE_ARRAY = "reactive_array"

    @property
    def is_template(self) -> bool:
        return self in (ContainerKind.TEMPLATE_FORM, ContainerKind.TEMPLATE_GROUP)

    @property
    def is_reactive(self) -> bool:
        return not self.is_template


class AbstractControlDirective(QObject, metaclass=PyQtABCMeta):
    """
    Read-through view of the control a directive is bound to.

    Every state property returns None while no control is bound.

    Signals:
        control_changed(object): the directive now reads through another control
    """

    control_changed = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        self._raw_validators: List[Any] = []
        self._raw_async_validators: List[Any] = []
        self._composed_validator: Optional[Callable] = None
        self._composed_async_validator: Optional[Callable] = None

    @property
    @abstractmethod
    def control(self) -> Optional[AbstractControl]:
        pass

    @property
    def path(self) -> Optional[List[Any]]:
        return None

    # ========== VALIDATORS ==========

    def _set_validators(self, validators: Optional[Iterable[Any]]) -> None:
        self._raw_validators = list(validators or [])
        self._composed_validator = compose([normalize_validator(v) for v in self._raw_validators])

    def _set_async_validators(self, validators: Optional[Iterable[Any]]) -> None:
        self._raw_async_validators = list(validators or [])
        self._composed_async_validator = compose_async(
            [normalize_validator(v) for v in self._raw_async_validators]
        )

    @property
    def validator(self) -> Optional[Callable]:
        """The directive's validators composed into one function, merged into its control."""
        return self._composed_validator

    @property
    def async_validator(self) -> Optional[Callable]:
        return self._composed_async_validator

    # ========== CONTROL STATE ==========

    def _read(self, name: str) -> Any:
        control = self.control
        return getattr(control, name) if control is not None else None

    @property
    def value(self) -> Any:
        return self._read("value")

    @property
    def status(self) -> Optional[ControlStatus]:
        return self._read("status")

    @property
    def errors(self):
        return self._read("errors")

    @property
    def valid(self) -> Optional[bool]:
        return self._read("valid")

    @property
    def invalid(self) -> Optional[bool]:
        return self._read("invalid")

    @property
    def pending(self) -> Optional[bool]:
        return self._read("pending")

    @property
    def disabled(self) -> Optional[bool]:
        return self._read("disabled")

    @property
    def enabled(self) -> Optional[bool]:
        return self._read("enabled")

    @property
    def pristine(self) -> Optional[bool]:
        return self._read("pristine")

    @property
    def dirty(self) -> Optional[bool]:
        return self._read("dirty")

    @property
    def touched(self) -> Optional[bool]:
        return self._read("touched")

    @property
    def untouched(self) -> Optional[bool]:
        return self._read("untouched")

    def reset(self, value: Any = UNSET) -> None:
        if self.control is not None:
            self.control.reset(value)

    def has_error(self, error_code: str, path=None) -> bool:
        return self.control.has_error(error_code, path) if self.control is not None else False

    def get_error(self, error_code: str, path=None) -> Any:
        return self.control.get_error(error_code, path) if self.control is not None else None


class ControlContainer(AbstractControlDirective):
    """A directive standing for a group or array: a form, or a nested group/array."""

    container_kind: ContainerKind

    def __init__(self, name: Optional[str] = None, parent: Optional["ControlContainer"] = None):
        super().__init__()
        self.name = name
        self._parent = parent

    @property
    def parent_container(self) -> Optional["ControlContainer"]:
        return self._parent

    @property
    def form_directive(self) -> Optional["AbstractFormDirective"]:
        return self._parent.form_directive if self._parent is not None else None

    @property
    def path(self) -> List[Any]:
        return control_path(self.name, self._parent) if self._parent is not None else [self.name]


class AbstractFormDirective(ControlContainer):
    """
    Root container bound to a FormGroup.

    Handles submit and reset for both directive families. Buttons can be
    attached so a click submits or resets:
        form_dir.attach_submit_button(ok_button)
        form_dir.form_submitted.connect(on_submit)
    """

    form_submitted = pyqtSignal(object)

    def __init__(self):
        super().__init__()
        self.submitted = False
        self._directives: List["ControlDirective"] = []

    @property
    @abstractmethod
    def form(self):
        pass

    @property
    def control(self):
        return self.form

    @property
    def path(self) -> List[Any]:
        return []

    @property
    def form_directive(self) -> "AbstractFormDirective":
        return self

    @property
    def directives(self) -> Sequence["ControlDirective"]:
        return tuple(self._directives)

    def on_submit(self, event: Any = None) -> bool:
        """
        Sync pending submit-strategy values, then emit form_submitted.

        Returns:
            False, so hosts that forward the result stop default handling
        """
        self.submitted = True
        sync_pending_controls(self.form, self._directives)
        logger.debug(f"{type(self).__name__} submitted")
        self.form_submitted.emit(event)
        return False

    def on_reset(self) -> None:
        self.reset_form()

    def reset_form(self, value: Any = UNSET) -> None:
        self.form.reset(value)
        self.submitted = False

    def set_value(self, value: Any) -> None:
        self.form.set_value(value)

    def attach_submit_button(self, button: QAbstractButton) -> None:
        button.clicked.connect(self._on_submit_clicked)

    def attach_reset_button(self, button: QAbstractButton) -> None:
        button.clicked.connect(self._on_reset_clicked)

    def _on_submit_clicked(self, *_) -> None:
        self.on_submit()

    def _on_reset_clicked(self, *_) -> None:
        self.on_reset()


class ControlDirective(AbstractControlDirective):
    """
    Leaf directive: binds one widget to one FormControl.

    The value accessor is chosen among the accessors registered for the
    widget plus the explicitly supplied value_accessors.

    Signals:
        model_changed(object): the view pushed a new value into the model
    """

    model_changed = pyqtSignal(object)

    def __init__(self, name: Optional[str] = None, parent: Optional[ControlContainer] = None,
                 widget: Optional[QWidget] = None, validators=None, async_validators=None,
                 value_accessors: Optional[Sequence[ControlValueAccessor]] = None):
        super().__init__()
        self.name = name
        self._parent = parent
        self.widget = widget
        self.view_model: Any = UNSET
        self._on_destroy_callbacks: List[Callable[[], None]] = []

        self._set_validators(validators)
        self._set_async_validators(async_validators)

        candidates = accessors_for_widget(widget) if widget is not None else []
        candidates.extend(value_accessors or [])
        self.value_accessor: Optional[ControlValueAccessor] = select_value_accessor(self, candidates)

    @property
    def parent_container(self) -> Optional[ControlContainer]:
        return self._parent

    @property
    def path(self) -> List[Any]:
        return control_path(self.name, self._parent) if self._parent is not None else [self.name]

    @property
    def form_directive(self) -> Optional[AbstractFormDirective]:
        return self._parent.form_directive if self._parent is not None else None

    def view_to_model_update(self, new_value: Any) -> None:
        self.view_model = new_value
        self.model_changed.emit(new_value)

    def _is_model_updated(self, model: Any) -> bool:
        if self.view_model is UNSET:
            return True
        return not (model is self.view_model or model == self.view_model)

    def _register_on_destroy(self, callback: Callable[[], None]) -> None:
        self._on_destroy_callbacks.append(callback)

    def _invoke_on_destroy_callbacks(self) -> None:
        callbacks, self._on_destroy_callbacks = self._on_destroy_callbacks, []
        for callback in callbacks:
            callback()
