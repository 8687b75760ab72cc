"""
Value accessor ABC contracts.

A value accessor translates between a control's abstract value and a concrete
widget's native value. Capabilities are composed through multiple
inheritance, the same way the directive layer checks them:

- ControlValueAccessor: write, change and touch callbacks (required)
- DisabledStateCapable: mirrors the control's disabled flag onto the widget
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from pyqt_formbind.directives.abstract_directives import ControlDirective


class AccessorKind(Enum):
    """
    Selection tier of an accessor.

    When several accessors match one widget, a CUSTOM accessor wins over a
    BUILTIN one, which wins over the DEFAULT text accessor.
    """
    DEFAULT = "default"
    BUILTIN = "builtin"
    CUSTOM = "custom"


class ControlValueAccessor(ABC):
    """
    ABC for objects that bind a control value to a widget.

    Subclasses not shipped with the library are CUSTOM unless they say
    otherwise.
    """

    accessor_kind: AccessorKind = AccessorKind.CUSTOM

    @abstractmethod
    def write_value(self, value: Any) -> None:
        """
        Write a model value into the widget.

        Must not report the write back through the change callback.
        """
        pass

    @abstractmethod
    def register_on_change(self, callback: Callable[[Any], None]) -> None:
        """
        Register the view→model callback.

        Args:
            callback: Called with the widget's new value on user change
        """
        pass

    @abstractmethod
    def register_on_touched(self, callback: Callable[[], None]) -> None:
        """
        Register the blur callback.

        Args:
            callback: Called without arguments when the widget loses focus
        """
        pass

    def on_attach(self, directive: "ControlDirective") -> None:
        """Called once the accessor is bound to a directive's control."""
        pass

    def on_detach(self) -> None:
        """Called when the directive releases its control."""
        pass


class DisabledStateCapable(ABC):
    """ABC for accessors that reflect the control's disabled flag."""

    @abstractmethod
    def set_disabled_state(self, disabled: bool) -> None:
        pass
