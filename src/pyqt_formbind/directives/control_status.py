"""Mirror control status onto widget dynamic properties for style sheets."""

import logging
from typing import Optional

from PyQt6.QtCore import QObject
from PyQt6.QtWidgets import QWidget

from pyqt_formbind.core.microtask_queue import MicrotaskQueue, get_microtask_queue
from pyqt_formbind.directives.abstract_directives import AbstractControlDirective
from pyqt_formbind.model.abstract_control import AbstractControl
from pyqt_formbind.protocols.form_config import get_form_config

logger = logging.getLogger(__name__)

STATUS_FLAGS = ("untouched", "touched", "pristine", "dirty", "valid", "invalid", "pending")


class ControlStatusBinder(QObject):
    """
    Keeps boolean dynamic properties on a widget in sync with a directive's control.

    With the default "form_" prefix a widget gets form_valid, form_invalid,
    form_pending, form_touched, form_untouched, form_pristine and form_dirty,
    so style sheets can react:

        app.setStyleSheet('QLineEdit[form_invalid="true"][form_touched="true"] { border: 1px solid red; }')
        ControlStatusBinder(name_edit, name_directive)

    The binder is parented to the widget, so it lives as long as the widget
    without the caller keeping a reference. Binding waits for the microtask
    queue, since template-driven directives only get their final control once
    registration has run; it re-binds whenever the directive's control_changed
    fires.
    """

    def __init__(self, widget: QWidget, directive: AbstractControlDirective,
                 prefix: Optional[str] = None, queue: Optional[MicrotaskQueue] = None):
        super().__init__(widget)
        self.widget = widget
        self.directive = directive
        self._prefix = prefix if prefix is not None else get_form_config().status_property_prefix
        self._control: Optional[AbstractControl] = None
        directive.control_changed.connect(self._on_directive_rebound)
        (queue if queue is not None else get_microtask_queue()).schedule(self.bind)

    def bind(self) -> None:
        """(Re)subscribe to the directive's current control and apply its status."""
        self.unbind()
        self._control = self.directive.control
        if self._control is not None:
            for signal in self._signals(self._control):
                signal.connect(self._on_control_changed)
        self.apply()

    def unbind(self) -> None:
        if self._control is not None:
            for signal in self._signals(self._control):
                signal.disconnect(self._on_control_changed)
            self._control = None

    def apply(self) -> None:
        """Write every flag and re-polish the widget."""
        control = self._control
        for flag in STATUS_FLAGS:
            self.widget.setProperty(self._prefix + flag, bool(control is not None and getattr(control, flag)))
        style = self.widget.style()
        style.unpolish(self.widget)
        style.polish(self.widget)

    @staticmethod
    def _signals(control: AbstractControl):
        return (control.status_changed, control.value_changed,
                control.touched_changed, control.pristine_changed)

    def _on_control_changed(self, _value) -> None:
        self.apply()

    def _on_directive_rebound(self, _control) -> None:
        logger.debug(f"Re-binding status flags of {type(self.directive).__name__}")
        self.bind()
