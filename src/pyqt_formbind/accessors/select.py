"""Accessors for choice widgets: QComboBox and multi-selection QListWidget."""

from typing import Any, Callable, List, Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import QComboBox, QListWidget, QListWidgetItem, QWidget

from pyqt_formbind.accessors.base import WidgetValueAccessor
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.protocols.value_accessor import AccessorKind


def _is_same(a: Any, b: Any) -> bool:
    return a == b


class _ComparingAccessor(WidgetValueAccessor):
    """Shared compare_with handling for option-based accessors."""

    def __init__(self, widget: QWidget):
        super().__init__(widget)
        self._compare_with: Callable[[Any, Any], bool] = _is_same

    @property
    def compare_with(self) -> Callable[[Any, Any], bool]:
        """Predicate deciding whether an option value equals the model value."""
        return self._compare_with

    @compare_with.setter
    def compare_with(self, fn: Callable[[Any, Any], bool]) -> None:
        if not callable(fn):
            raise FormConfigurationError(f"compare_with must be a function, but received {fn!r}")
        self._compare_with = fn


class SelectValueAccessor(_ComparingAccessor):
    """
    Single-choice accessor for QComboBox.

    An option's value is its item data, or its text when it has no data:
        combo.addItem("Red", "r")
        combo.addItem("Green")      # value "Green"

    A model value matching no option clears the selection.
    """

    _accessor_id = "select"
    _widget_types = (QComboBox,)
    accessor_kind = AccessorKind.BUILTIN

    def option_value(self, index: int) -> Any:
        data = self.widget.itemData(index)
        return self.widget.itemText(index) if data is None else data

    def _write(self, value: Any) -> None:
        self.widget.setCurrentIndex(self._find_index(value))

    def _find_index(self, value: Any) -> int:
        for index in range(self.widget.count()):
            if self._compare_with(self.option_value(index), value):
                return index
        return -1

    def _connect_change(self) -> None:
        self.widget.currentIndexChanged.connect(self._on_index_changed)

    def _on_index_changed(self, index: int) -> None:
        self._emit_change(self.option_value(index) if index >= 0 else None)


class SelectMultipleValueAccessor(_ComparingAccessor):
    """
    Multi-choice accessor for QListWidget; the value is a list.

    An item's value is its Qt.ItemDataRole.UserRole data, or its text. The
    list widget's selection mode is left to the caller.
    """

    _accessor_id = "select_multiple"
    _widget_types = (QListWidget,)
    accessor_kind = AccessorKind.BUILTIN

    @staticmethod
    def option_value(item: QListWidgetItem) -> Any:
        data = item.data(Qt.ItemDataRole.UserRole)
        return item.text() if data is None else data

    def _write(self, value: Any) -> None:
        if not isinstance(value, Sequence) or isinstance(value, str):
            return
        for row in range(self.widget.count()):
            item = self.widget.item(row)
            option = self.option_value(item)
            item.setSelected(any(self._compare_with(option, v) for v in value))

    def _read(self) -> List[Any]:
        return [
            self.option_value(self.widget.item(row))
            for row in range(self.widget.count())
            if self.widget.item(row).isSelected()
        ]

    def _connect_change(self) -> None:
        self.widget.itemSelectionChanged.connect(self._on_selection_changed)

    def _on_selection_changed(self) -> None:
        self._emit_change(self._read())
