"""
Value accessors for PyQt6 widgets.

Importing this package registers the built-in accessors, so
accessors_for_widget() can offer them for any matching widget.
"""

from .registry import ACCESSOR_IMPLEMENTATIONS, AccessorMeta, accessors_for_widget, get_accessor_class
from .base import WidgetValueAccessor
from .builtin import (
    DefaultValueAccessor,
    CheckboxValueAccessor,
    NumberValueAccessor,
    RangeValueAccessor,
)
from .select import SelectValueAccessor, SelectMultipleValueAccessor
from .radio import RadioControlRegistry, RadioValueAccessor, get_radio_registry

__all__ = [
    "ACCESSOR_IMPLEMENTATIONS",
    "AccessorMeta",
    "accessors_for_widget",
    "get_accessor_class",
    "WidgetValueAccessor",
    "DefaultValueAccessor",
    "CheckboxValueAccessor",
    "NumberValueAccessor",
    "RangeValueAccessor",
    "SelectValueAccessor",
    "SelectMultipleValueAccessor",
    "RadioControlRegistry",
    "RadioValueAccessor",
    "get_radio_registry",
]
