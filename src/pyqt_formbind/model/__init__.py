"""
Reactive control tree.

Leaf controls, keyed groups and indexed arrays sharing one state machine for
value, validity and interaction tracking.
"""

from .status import ControlStatus, UpdateOn
from .abstract_control import AbstractControl, ControlEvents, FormState, UNSET, unbox_form_state
from .form_control import FormControl
from .form_group import FormGroup
from .form_array import FormArray
from .form_builder import FormBuilder

__all__ = [
    "ControlStatus",
    "UpdateOn",
    "AbstractControl",
    "ControlEvents",
    "FormState",
    "UNSET",
    "unbox_form_state",
    "FormControl",
    "FormGroup",
    "FormArray",
    "FormBuilder",
]
