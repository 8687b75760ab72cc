"""Validator directive contracts."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional

from pyqt_formbind.validation.composition import ErrorMap

if TYPE_CHECKING:
    from pyqt_formbind.model.abstract_control import AbstractControl


class ValidatorDirective(ABC):
    """
    A directive-style validator: an object whose inputs may change.

    The directive layer calls validate() through a composed function and
    re-validates the bound control whenever the object reports a change.
    """

    @abstractmethod
    def validate(self, control: "AbstractControl") -> Optional[ErrorMap]:
        pass

    def register_on_validator_change(self, callback: Callable[[], None]) -> None:
        """Store callback; call it whenever an input affecting validate() changes."""
        pass


class AsyncValidatorDirective(ABC):
    """Async twin of ValidatorDirective: validate() returns an awaitable."""

    @abstractmethod
    def validate(self, control: "AbstractControl") -> Awaitable[Optional[ErrorMap]]:
        pass

    def register_on_validator_change(self, callback: Callable[[], None]) -> None:
        pass


def normalize_validator(validator: Any) -> Callable:
    """Turn a validator directive into its validate() function; plain functions pass through."""
    if isinstance(validator, (ValidatorDirective, AsyncValidatorDirective)):
        return validator.validate
    return validator
