"""
Validator composition engine and built-in validators.

Pure Python with no Qt dependency: validators receive a control and return an
error map or None.
"""

from .composition import (
    ErrorMap,
    ValidatorFn,
    AsyncValidatorFn,
    compose,
    compose_async,
    merge_errors,
    to_future,
)
from .validators import Validators, EMAIL_PATTERN, is_empty_input_value, parse_float
from .validator_set import ValidatorSet

__all__ = [
    "ErrorMap",
    "ValidatorFn",
    "AsyncValidatorFn",
    "compose",
    "compose_async",
    "merge_errors",
    "to_future",
    "Validators",
    "EMAIL_PATTERN",
    "is_empty_input_value",
    "parse_float",
    "ValidatorSet",
]
