"""
Accessor registry with metaclass auto-registration.

Accessor classes register themselves when defined, and the registry doubles
as the provider lookup for a widget: accessors_for_widget() instantiates
every registered accessor whose declared widget types match.

Design:
- AccessorMeta metaclass handles auto-registration
- ACCESSOR_IMPLEMENTATIONS: accessor_id -> accessor class
- Classes without _accessor_id (intermediate bases) are skipped
"""

from typing import Dict, List, Type
import logging

from PyQt6.QtWidgets import QWidget

from pyqt_formbind.protocols.qt_abc import PyQtABCMeta

logger = logging.getLogger(__name__)

# Maps accessor_id -> accessor class
ACCESSOR_IMPLEMENTATIONS: Dict[str, Type] = {}


class AccessorMeta(PyQtABCMeta):
    """
    Metaclass for automatic accessor registration.

    1. Only registers concrete implementations (no abstract methods)
    2. Requires an _accessor_id attribute for identification
    3. Reads _widget_types to know which widgets the accessor binds

    Example:
        class DialValueAccessor(WidgetValueAccessor):
            _accessor_id = "dial"
            _widget_types = (QDial,)
            ...

    The accessor registers in ACCESSOR_IMPLEMENTATIONS["dial"] when the class
    is defined and is offered for every QDial from then on.
    """

    def __new__(mcs, name, bases, attrs):
        new_class = super().__new__(mcs, name, bases, attrs)

        if getattr(new_class, '__abstractmethods__', None):
            logger.debug(
                f"Skipping registration for {name} - abstract methods remaining: "
                f"{set(new_class.__abstractmethods__)}"
            )
            return new_class

        accessor_id = attrs.get('_accessor_id')
        if accessor_id is None:
            logger.debug(f"Skipping registration for {name} - no _accessor_id attribute")
            return new_class

        if accessor_id in ACCESSOR_IMPLEMENTATIONS:
            existing = ACCESSOR_IMPLEMENTATIONS[accessor_id]
            logger.warning(
                f"Accessor ID '{accessor_id}' already registered to {existing.__name__}. "
                f"Overwriting with {name}."
            )

        ACCESSOR_IMPLEMENTATIONS[accessor_id] = new_class
        logger.debug(
            f"Auto-registered {name} as '{accessor_id}' for "
            f"{[t.__name__ for t in getattr(new_class, '_widget_types', ())]}"
        )
        return new_class


def get_accessor_class(accessor_id: str) -> Type:
    """
    Get accessor class by ID.

    Raises:
        KeyError: If accessor_id is not registered
    """
    if accessor_id not in ACCESSOR_IMPLEMENTATIONS:
        raise KeyError(
            f"No accessor registered with ID '{accessor_id}'. "
            f"Available accessors: {list(ACCESSOR_IMPLEMENTATIONS.keys())}"
        )
    return ACCESSOR_IMPLEMENTATIONS[accessor_id]


def accessors_for_widget(widget: QWidget) -> List:
    """
    Instantiate every registered accessor that declares a matching widget type.

    Accessors that need extra arguments (radio buttons) declare no widget
    types and are never returned here; callers construct them explicitly.
    """
    matches = [
        accessor_class(widget)
        for accessor_class in ACCESSOR_IMPLEMENTATIONS.values()
        if accessor_class._widget_types and isinstance(widget, tuple(accessor_class._widget_types))
    ]
    logger.debug(f"{len(matches)} accessor(s) match {type(widget).__name__}")
    return matches
