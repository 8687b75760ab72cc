"""Exception hierarchy for pyqt-formbind.

Validation failures are never raised: they live in ``control.errors``.
Everything here is a programmer mistake surfaced at the point of misuse.
"""


class FormsError(Exception):
    """Base class for all pyqt-formbind errors."""


class FormConfigurationError(FormsError):
    """Raised when controls, directives or accessors are wired incorrectly."""


class ControlStructureError(FormConfigurationError):
    """Raised when a value does not match the shape of a composite control."""


class AsyncValidationError(FormsError):
    """Raised when an async validator cannot be scheduled."""
