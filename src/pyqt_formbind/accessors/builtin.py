"""
Built-in accessors for text, check, number and range widgets.

Text widgets get the DEFAULT accessor; the others are BUILTIN and win over it
when both match.
"""

import math
from typing import Any, Optional

from PyQt6.QtWidgets import (
    QCheckBox, QDial, QDoubleSpinBox, QLineEdit, QPlainTextEdit, QSlider, QSpinBox
)

from pyqt_formbind.accessors.base import WidgetValueAccessor
from pyqt_formbind.protocols.value_accessor import AccessorKind
from pyqt_formbind.validation.validators import parse_float


class DefaultValueAccessor(WidgetValueAccessor):
    """
    Text accessor for QLineEdit and QPlainTextEdit.

    None is written as an empty string; the value read back is always the text.
    """

    _accessor_id = "default"
    _widget_types = (QLineEdit, QPlainTextEdit)
    accessor_kind = AccessorKind.DEFAULT

    def _write(self, value: Any) -> None:
        text = "" if value is None else str(value)
        if isinstance(self.widget, QPlainTextEdit):
            self.widget.setPlainText(text)
        else:
            self.widget.setText(text)

    def _read(self) -> str:
        if isinstance(self.widget, QPlainTextEdit):
            return self.widget.toPlainText()
        return self.widget.text()

    def _connect_change(self) -> None:
        self.widget.textChanged.connect(self._on_text_changed)

    def _on_text_changed(self, *_) -> None:
        self._emit_change(self._read())


class CheckboxValueAccessor(WidgetValueAccessor):
    """Boolean accessor for QCheckBox."""

    _accessor_id = "checkbox"
    _widget_types = (QCheckBox,)
    accessor_kind = AccessorKind.BUILTIN

    def _write(self, value: Any) -> None:
        self.widget.setChecked(bool(value))

    def _connect_change(self) -> None:
        self.widget.toggled.connect(self._emit_change)


class NumberValueAccessor(WidgetValueAccessor):
    """
    Numeric accessor for QSpinBox and QDoubleSpinBox.

    None (or anything without a numeric prefix) is written as the minimum. If
    the widget has specialValueText, the minimum reads back as None, so an
    "empty" spin box round-trips.
    """

    _accessor_id = "number"
    _widget_types = (QSpinBox, QDoubleSpinBox)
    accessor_kind = AccessorKind.BUILTIN

    def _write(self, value: Any) -> None:
        number = math.nan if value is None else parse_float(value)
        if math.isnan(number):
            self.widget.setValue(self.widget.minimum())
        elif isinstance(self.widget, QSpinBox):
            self.widget.setValue(int(number))
        else:
            self.widget.setValue(number)

    def _read(self) -> Optional[float]:
        value = self.widget.value()
        if self.widget.specialValueText() and value == self.widget.minimum():
            return None
        return value

    def _connect_change(self) -> None:
        self.widget.valueChanged.connect(self._on_value_changed)

    def _on_value_changed(self, *_) -> None:
        self._emit_change(self._read())


class RangeValueAccessor(WidgetValueAccessor):
    """Integer accessor for QSlider and QDial."""

    _accessor_id = "range"
    _widget_types = (QSlider, QDial)
    accessor_kind = AccessorKind.BUILTIN

    def _write(self, value: Any) -> None:
        number = math.nan if value is None else parse_float(value)
        self.widget.setValue(self.widget.minimum() if math.isnan(number) else int(number))

    def _connect_change(self) -> None:
        self.widget.valueChanged.connect(self._emit_change)
