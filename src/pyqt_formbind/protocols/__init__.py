"""
Protocol contracts and global configuration.

Explicit ABCs instead of duck typing: accessors and validator directives
declare what they support by inheritance.
"""

from .form_config import FormBindConfig, set_form_config, get_form_config
from .qt_abc import PyQtABCMeta
from .value_accessor import AccessorKind, ControlValueAccessor, DisabledStateCapable
from .validator_protocols import ValidatorDirective, AsyncValidatorDirective, normalize_validator

__all__ = [
    "FormBindConfig",
    "set_form_config",
    "get_form_config",
    "PyQtABCMeta",
    "AccessorKind",
    "ControlValueAccessor",
    "DisabledStateCapable",
    "ValidatorDirective",
    "AsyncValidatorDirective",
    "normalize_validator",
]
