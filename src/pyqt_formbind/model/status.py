"""Status and update-strategy enums shared by every control node."""

from enum import Enum


class ControlStatus(str, Enum):
    """Validation status of a control node.

    Derived by the control itself; consumers only read it.
    """
    VALID = "VALID"
    INVALID = "INVALID"
    PENDING = "PENDING"
    DISABLED = "DISABLED"


class UpdateOn(str, Enum):
    """Event that copies a view value into the model."""
    CHANGE = "change"
    BLUR = "blur"
    SUBMIT = "submit"
