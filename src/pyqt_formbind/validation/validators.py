"""
Built-in synchronous validators.

Every validator except required/required_true lets "empty" values (None or
zero length) pass, so optional fields skip range and format checks.
"""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any, Iterable, Optional, Pattern, Union

from pyqt_formbind.protocols.form_config import get_form_config
from .composition import ErrorMap, ValidatorFn, compose, compose_async

if TYPE_CHECKING:
    from pyqt_formbind.model.abstract_control import AbstractControl

EMAIL_PATTERN = (
    r"^(?=.{1,254}$)(?=.{1,64}@)[-!#$%&'*+/0-9=?A-Z^_`a-z{|}~]+"
    r"(\.[-!#$%&'*+/0-9=?A-Z^_`a-z{|}~]+)*@[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(\.[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?)*$"
)

# Leading numeric prefix, the way HTML number inputs read "12px" as 12
_FLOAT_PREFIX = re.compile(r"^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_empty_input_value(value: Any) -> bool:
    """None or anything with a zero length. Works for strings and sequences alike."""
    if value is None:
        return True
    try:
        return len(value) == 0
    except TypeError:
        return False


def parse_float(value: Any) -> float:
    """Parse a control value as a float, returning NaN when it has no numeric prefix."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX.match(value)
        if match:
            return float(match.group(0))
    return math.nan


def _length(value: Any) -> Optional[int]:
    try:
        return len(value)
    except TypeError:
        return None


class Validators:
    """
    Factory of built-in validators.

    Examples:
        FormControl("", Validators.required)
        FormControl(2, [Validators.min(3), Validators.max(10)])
        FormControl("", Validators.compose([Validators.required, Validators.email]))
    """

    @staticmethod
    def min(minimum: Optional[float]) -> ValidatorFn:
        """Value parsed as float must be >= minimum. NaN after parsing passes."""
        def validator(control: "AbstractControl") -> Optional[ErrorMap]:
            if is_empty_input_value(control.value) or minimum is None:
                return None
            value = parse_float(control.value)
            if not math.isnan(value) and value < minimum:
                return {"min": {"min": minimum, "actual": control.value}}
            return None
        return validator

    @staticmethod
    def max(maximum: Optional[float]) -> ValidatorFn:
        """Value parsed as float must be <= maximum. NaN after parsing passes."""
        def validator(control: "AbstractControl") -> Optional[ErrorMap]:
            if is_empty_input_value(control.value) or maximum is None:
                return None
            value = parse_float(control.value)
            if not math.isnan(value) and value > maximum:
                return {"max": {"max": maximum, "actual": control.value}}
            return None
        return validator

    @staticmethod
    def required(control: "AbstractControl") -> Optional[ErrorMap]:
        return {"required": True} if is_empty_input_value(control.value) else None

    @staticmethod
    def required_true(control: "AbstractControl") -> Optional[ErrorMap]:
        """Used for checkboxes that must be ticked."""
        return None if control.value is True else {"required": True}

    @staticmethod
    def email(control: "AbstractControl") -> Optional[ErrorMap]:
        if is_empty_input_value(control.value):
            return None
        pattern = get_form_config().email_pattern or EMAIL_PATTERN
        return None if re.search(pattern, str(control.value)) else {"email": True}

    @staticmethod
    def min_length(min_length: int) -> ValidatorFn:
        def validator(control: "AbstractControl") -> Optional[ErrorMap]:
            if is_empty_input_value(control.value):
                return None
            length = _length(control.value)
            if length is not None and length < min_length:
                return {"minlength": {"required_length": min_length, "actual_length": length}}
            return None
        return validator

    @staticmethod
    def max_length(max_length: int) -> ValidatorFn:
        def validator(control: "AbstractControl") -> Optional[ErrorMap]:
            length = _length(control.value) or 0
            if length > max_length:
                return {"maxlength": {"required_length": max_length, "actual_length": length}}
            return None
        return validator

    @staticmethod
    def pattern(pattern: Union[str, Pattern[str], None]) -> ValidatorFn:
        """
        Value must match the pattern.

        String patterns are anchored with ``^``/``$`` unless already anchored.
        Compiled patterns are used as given and searched, never re-anchored.
        """
        if not pattern:
            return Validators.null_validator

        if isinstance(pattern, str):
            regex_str = pattern
            if not regex_str.startswith("^"):
                regex_str = "^" + regex_str
            if not regex_str.endswith("$"):
                regex_str += "$"
            regex = re.compile(regex_str)
        else:
            regex = pattern
            regex_str = pattern.pattern

        def validator(control: "AbstractControl") -> Optional[ErrorMap]:
            if is_empty_input_value(control.value):
                return None
            value = control.value
            if regex.search(str(value)):
                return None
            return {"pattern": {"required_pattern": regex_str, "actual_value": value}}
        return validator

    @staticmethod
    def null_validator(control: "AbstractControl") -> Optional[ErrorMap]:
        return None

    @staticmethod
    def compose(validators: Optional[Iterable[Optional[ValidatorFn]]]) -> Optional[ValidatorFn]:
        return compose(validators)

    @staticmethod
    def compose_async(validators):
        return compose_async(validators)
