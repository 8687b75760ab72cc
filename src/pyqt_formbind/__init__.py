"""
pyqt-formbind: reactive form controls and validation bound to PyQt6 widgets.

A control tree (FormControl / FormGroup / FormArray) tracks value, validity
and interaction state; directives bind it to widgets through value accessors.

Architecture:
- Tier 1 (Validation): Validator composition and built-in validators, no Qt
- Tier 2 (Model): Control tree state machine with sync + async validation
- Tier 3 (Core/Services): Microtask queue, signal blocking
- Tier 4 (Accessors): Widget value accessors with auto-registration
- Tier 5 (Directives): Template-driven and reactive binding of widgets to controls

Key Features:
- Status bubbling from any control to every ancestor
- Async validators on asyncio with last-run-wins results
- Deferred registration of template-driven controls
- change / blur / submit update strategies
- ABC-based accessor protocols (no duck typing)
"""

__version__ = "0.1.0"

from pyqt_formbind.errors import (
    FormsError,
    FormConfigurationError,
    ControlStructureError,
    AsyncValidationError,
)
from pyqt_formbind.validation import Validators, ValidatorSet, compose, compose_async
from pyqt_formbind.model import (
    ControlStatus,
    UpdateOn,
    FormState,
    UNSET,
    AbstractControl,
    FormControl,
    FormGroup,
    FormArray,
    FormBuilder,
)
from pyqt_formbind.protocols import (
    FormBindConfig,
    set_form_config,
    get_form_config,
    AccessorKind,
    ControlValueAccessor,
    ValidatorDirective,
    AsyncValidatorDirective,
)
from pyqt_formbind.core import flush_microtasks, schedule_microtask

__all__ = [
    "__version__",
    "FormsError",
    "FormConfigurationError",
    "ControlStructureError",
    "AsyncValidationError",
    "Validators",
    "ValidatorSet",
    "compose",
    "compose_async",
    "ControlStatus",
    "UpdateOn",
    "FormState",
    "UNSET",
    "AbstractControl",
    "FormControl",
    "FormGroup",
    "FormArray",
    "FormBuilder",
    "FormBindConfig",
    "set_form_config",
    "get_form_config",
    "AccessorKind",
    "ControlValueAccessor",
    "ValidatorDirective",
    "AsyncValidatorDirective",
    "flush_microtasks",
    "schedule_microtask",
]
