"""Radio button accessor and the registry that keeps a radio group exclusive."""

from typing import TYPE_CHECKING, Any, List, Optional, Tuple
import logging

from PyQt6.QtWidgets import QRadioButton

from pyqt_formbind.accessors.base import WidgetValueAccessor
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.protocols.value_accessor import AccessorKind

if TYPE_CHECKING:
    from pyqt_formbind.directives.abstract_directives import ControlDirective

logger = logging.getLogger(__name__)


class RadioControlRegistry:
    """
    Tracks bound radio accessors so selecting one unchecks its siblings.

    Two accessors are in the same group when their directives share a parent
    container and the accessors share a name.
    """

    def __init__(self):
        self._accessors: List[Tuple["ControlDirective", "RadioValueAccessor"]] = []

    def add(self, directive: "ControlDirective", accessor: "RadioValueAccessor") -> None:
        self._accessors.append((directive, accessor))

    def remove(self, accessor: "RadioValueAccessor") -> None:
        for index in range(len(self._accessors) - 1, -1, -1):
            if self._accessors[index][1] is accessor:
                del self._accessors[index]
                return

    def select(self, accessor: "RadioValueAccessor") -> None:
        for directive, other in list(self._accessors):
            if other is not accessor and self._is_same_group(directive, other, accessor):
                other.fire_uncheck(accessor.value)

    @staticmethod
    def _is_same_group(directive: "ControlDirective", other: "RadioValueAccessor",
                       accessor: "RadioValueAccessor") -> bool:
        if directive.control is None or accessor.directive is None:
            return False
        return directive.parent_container is accessor.directive.parent_container and other.name == accessor.name

    def __len__(self) -> int:
        return len(self._accessors)


_default_registry = RadioControlRegistry()


def get_radio_registry() -> RadioControlRegistry:
    return _default_registry


class RadioValueAccessor(WidgetValueAccessor):
    """
    Accessor for one QRadioButton standing for one option value.

    Every button of a group binds the same control; the button is checked
    when the control's value equals its own value.

    Example:
        for value, button in (("tea", tea_button), ("coffee", coffee_button)):
            FormControlNameDirective(
                "drink", parent=form_dir, widget=button,
                value_accessors=[RadioValueAccessor(button, value)],
            )

    Radio accessors declare no widget types, so provider lookup never builds
    them; they always come in through value_accessors.
    """

    _accessor_id = "radio"
    accessor_kind = AccessorKind.BUILTIN

    def __init__(self, widget: QRadioButton, value: Any, name: Optional[str] = None,
                 registry: Optional[RadioControlRegistry] = None):
        super().__init__(widget)
        self.value = value
        self.name = name
        self.directive: Optional["ControlDirective"] = None
        self._registry = registry if registry is not None else _default_registry

    def on_attach(self, directive: "ControlDirective") -> None:
        if self.name and directive.name and self.name != directive.name:
            raise FormConfigurationError(
                f"Radio button name '{self.name}' does not match its control name "
                f"'{directive.name}'. If you set both, their values must match."
            )
        if not self.name:
            self.name = directive.name
        self.directive = directive
        self._registry.add(directive, self)

    def on_detach(self) -> None:
        super().on_detach()
        self._registry.remove(self)
        self.directive = None

    def fire_uncheck(self, value: Any) -> None:
        self.write_value(value)

    def _write(self, value: Any) -> None:
        checked = value == self.value
        if checked == self.widget.isChecked():
            return
        # auto-exclusive buttons refuse to uncheck themselves
        exclusive = self.widget.autoExclusive()
        self.widget.setAutoExclusive(False)
        self.widget.setChecked(checked)
        self.widget.setAutoExclusive(exclusive)

    def _connect_change(self) -> None:
        self.widget.toggled.connect(self._on_toggled)

    def _on_toggled(self, checked: bool) -> None:
        if not checked:
            return
        self._emit_change(self.value)
        self._registry.select(self)
