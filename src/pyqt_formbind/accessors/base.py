"""Base class for value accessors that bind a QWidget."""

from abc import abstractmethod
from typing import Any, Callable, Optional, Tuple
import logging

from PyQt6.QtCore import QEvent, QObject
from PyQt6.QtWidgets import QWidget

from pyqt_formbind.accessors.registry import AccessorMeta
from pyqt_formbind.protocols.value_accessor import (
    AccessorKind, ControlValueAccessor, DisabledStateCapable
)
from pyqt_formbind.services.signal_service import SignalService

logger = logging.getLogger(__name__)


def _noop_change(value: Any) -> None:
    pass


def _noop_touched() -> None:
    pass


class WidgetValueAccessor(QObject, ControlValueAccessor, DisabledStateCapable, metaclass=AccessorMeta):
    """
    Accessor over a single QWidget.

    Normalizes Qt's inconsistent APIs (text(), value(), isChecked(),
    currentIndex()...) into write_value() plus change/touch callbacks:
    - change: the widget's own change signal, connected in _connect_change()
    - touch: QEvent.FocusOut, observed through an event filter
    - writes: performed with the widget's signals blocked

    The accessor is parented to its widget and lives as long as it does.

    Subclasses set _accessor_id and _widget_types to take part in provider
    lookup, and implement _write() and _connect_change().
    """

    _accessor_id: Optional[str] = None
    _widget_types: Tuple[type, ...] = ()

    def __init__(self, widget: QWidget):
        super().__init__(widget)
        self.widget = widget
        self._on_change: Callable[[Any], None] = _noop_change
        self._on_touched: Callable[[], None] = _noop_touched
        widget.installEventFilter(self)
        self._connect_change()

    # ========== ControlValueAccessor ==========

    def write_value(self, value: Any) -> None:
        with SignalService.block_signals(self.widget):
            self._write(value)

    def register_on_change(self, callback: Callable[[Any], None]) -> None:
        self._on_change = callback

    def register_on_touched(self, callback: Callable[[], None]) -> None:
        self._on_touched = callback

    def set_disabled_state(self, disabled: bool) -> None:
        self.widget.setEnabled(not disabled)

    def on_detach(self) -> None:
        self._on_change = _noop_change
        self._on_touched = _noop_touched

    # ========== Qt plumbing ==========

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if obj is self.widget and event.type() == QEvent.Type.FocusOut:
            self._on_touched()
        return False

    def _emit_change(self, value: Any) -> None:
        self._on_change(value)

    @abstractmethod
    def _write(self, value: Any) -> None:
        """Write value into the widget (signals are already blocked)."""
        pass

    @abstractmethod
    def _connect_change(self) -> None:
        """Connect the widget's change signal to _emit_change()."""
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}({type(self.widget).__name__})"
