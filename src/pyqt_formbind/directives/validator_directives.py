"""
Validator directives.

Objects wrapping the built-in validators behind changeable inputs. Passed in
a directive's validators list, they are merged into the bound control, and
changing an input re-validates it:

    min_len = MinLengthValidator(3)
    FormControlNameDirective("name", form_dir, edit, validators=[RequiredValidator(), min_len])
    min_len.min_length = 5   # control re-validates immediately
"""

import re
from typing import Any, Callable, Optional, Pattern, Union

from pyqt_formbind.model.abstract_control import AbstractControl
from pyqt_formbind.protocols.validator_protocols import ValidatorDirective
from pyqt_formbind.validation.composition import ErrorMap, ValidatorFn
from pyqt_formbind.validation.validators import Validators


class _InputValidator(ValidatorDirective):
    """Holds the change callback and the validator built from the current inputs."""

    def __init__(self):
        self._on_change: Optional[Callable[[], None]] = None
        self._validator: ValidatorFn = Validators.null_validator

    def register_on_validator_change(self, callback: Callable[[], None]) -> None:
        self._on_change = callback

    def validate(self, control: AbstractControl) -> Optional[ErrorMap]:
        return self._validator(control)

    def _input_changed(self) -> None:
        self._create_validator()
        if self._on_change is not None:
            self._on_change()

    def _create_validator(self) -> None:
        pass


class RequiredValidator(_InputValidator):
    """Fails empty values while ``required`` is true."""

    def __init__(self, required: bool = True):
        super().__init__()
        self._required = bool(required)

    @property
    def required(self) -> bool:
        return self._required

    @required.setter
    def required(self, value: bool) -> None:
        self._required = bool(value)
        self._input_changed()

    def validate(self, control: AbstractControl) -> Optional[ErrorMap]:
        return Validators.required(control) if self._required else None


class CheckboxRequiredValidator(RequiredValidator):
    """Fails unless the value is exactly True while ``required`` is true."""

    def validate(self, control: AbstractControl) -> Optional[ErrorMap]:
        return Validators.required_true(control) if self._required else None


class EmailValidator(_InputValidator):
    def __init__(self, enabled: bool = True):
        super().__init__()
        self._enabled = bool(enabled)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)
        self._input_changed()

    def validate(self, control: AbstractControl) -> Optional[ErrorMap]:
        return Validators.email(control) if self._enabled else None


class MinLengthValidator(_InputValidator):
    """None disables the check."""

    def __init__(self, min_length: Optional[int] = None):
        super().__init__()
        self._min_length = min_length
        self._create_validator()

    @property
    def min_length(self) -> Optional[int]:
        return self._min_length

    @min_length.setter
    def min_length(self, value: Optional[int]) -> None:
        self._min_length = value
        self._input_changed()

    def _create_validator(self) -> None:
        self._validator = (
            Validators.min_length(int(self._min_length)) if self._min_length is not None
            else Validators.null_validator
        )


class MaxLengthValidator(_InputValidator):
    """None disables the check."""

    def __init__(self, max_length: Optional[int] = None):
        super().__init__()
        self._max_length = max_length
        self._create_validator()

    @property
    def max_length(self) -> Optional[int]:
        return self._max_length

    @max_length.setter
    def max_length(self, value: Optional[int]) -> None:
        self._max_length = value
        self._input_changed()

    def _create_validator(self) -> None:
        self._validator = (
            Validators.max_length(int(self._max_length)) if self._max_length is not None
            else Validators.null_validator
        )


class PatternValidator(_InputValidator):
    def __init__(self, pattern: Union[str, Pattern[str], None] = None):
        super().__init__()
        self._pattern = pattern
        self._create_validator()

    @property
    def pattern(self) -> Union[str, Pattern[str], None]:
        return self._pattern

    @pattern.setter
    def pattern(self, value: Union[str, Pattern[str], None]) -> None:
        self._pattern = value
        self._input_changed()

    def _create_validator(self) -> None:
        self._validator = Validators.pattern(self._pattern)


class MinValidator(_InputValidator):
    def __init__(self, minimum: Any = None):
        super().__init__()
        self._minimum = minimum
        self._create_validator()

    @property
    def minimum(self) -> Any:
        return self._minimum

    @minimum.setter
    def minimum(self, value: Any) -> None:
        self._minimum = value
        self._input_changed()

    def _create_validator(self) -> None:
        self._validator = Validators.min(_as_number(self._minimum))


class MaxValidator(_InputValidator):
    def __init__(self, maximum: Any = None):
        super().__init__()
        self._maximum = maximum
        self._create_validator()

    @property
    def maximum(self) -> Any:
        return self._maximum

    @maximum.setter
    def maximum(self, value: Any) -> None:
        self._maximum = value
        self._input_changed()

    def _create_validator(self) -> None:
        self._validator = Validators.max(_as_number(self._maximum))


_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$")


def _as_number(value: Any) -> Optional[float]:
    """Bounds arrive as numbers or numeric strings; anything else disables the check."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str) and _NUMBER.match(value):
        return float(value)
    return None
