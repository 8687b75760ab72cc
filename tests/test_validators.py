"""Tests for built-in validators."""

import re

import pytest

from pyqt_formbind.model import FormControl
from pyqt_formbind.protocols import FormBindConfig, set_form_config
from pyqt_formbind.validation import Validators, is_empty_input_value, parse_float


def control_with_value(value):
    return FormControl(value)


def test_required():
    """Empty string fails, non-empty passes."""
    assert Validators.required(control_with_value("")) == {"required": True}
    assert Validators.required(control_with_value(None)) == {"required": True}
    assert Validators.required(control_with_value([])) == {"required": True}
    assert Validators.required(control_with_value("x")) is None
    assert Validators.required(control_with_value(0)) is None


def test_required_true():
    assert Validators.required_true(control_with_value(True)) is None
    assert Validators.required_true(control_with_value(False)) == {"required": True}
    assert Validators.required_true(control_with_value("true")) == {"required": True}


def test_min():
    """min reports the bound and the actual value; NaN passes."""
    validator = Validators.min(3)
    assert validator(control_with_value(2)) == {"min": {"min": 3, "actual": 2}}
    assert validator(control_with_value(5)) is None
    assert validator(control_with_value(3)) is None
    assert validator(control_with_value("abc")) is None
    assert validator(control_with_value("")) is None
    assert validator(control_with_value(None)) is None


def test_min_parses_numeric_prefix():
    validator = Validators.min(3)
    assert validator(control_with_value("2px")) == {"min": {"min": 3, "actual": "2px"}}
    assert validator(control_with_value("4.5")) is None


def test_max():
    validator = Validators.max(10)
    assert validator(control_with_value(11)) == {"max": {"max": 10, "actual": 11}}
    assert validator(control_with_value(10)) is None
    assert validator(control_with_value("not a number")) is None


def test_min_max_none_bound_disables_check():
    assert Validators.min(None)(control_with_value(-100)) is None
    assert Validators.max(None)(control_with_value(100)) is None


def test_min_length():
    validator = Validators.min_length(3)
    assert validator(control_with_value("ab")) == {
        "minlength": {"required_length": 3, "actual_length": 2}
    }
    assert validator(control_with_value("abc")) is None
    assert validator(control_with_value("")) is None
    assert validator(control_with_value([1, 2])) == {
        "minlength": {"required_length": 3, "actual_length": 2}
    }


def test_min_length_ignores_values_without_length():
    assert Validators.min_length(3)(control_with_value(5)) is None


def test_max_length():
    validator = Validators.max_length(2)
    assert validator(control_with_value("abc")) == {
        "maxlength": {"required_length": 2, "actual_length": 3}
    }
    assert validator(control_with_value("ab")) is None
    assert validator(control_with_value(None)) is None


def test_pattern_string_is_anchored():
    validator = Validators.pattern("[a-z]+")
    assert validator(control_with_value("abc")) is None
    assert validator(control_with_value("abc1")) == {
        "pattern": {"required_pattern": "^[a-z]+$", "actual_value": "abc1"}
    }


def test_pattern_already_anchored_string_unchanged():
    validator = Validators.pattern("^a.c$")
    assert validator(control_with_value("xyz"))["pattern"]["required_pattern"] == "^a.c$"


def test_pattern_compiled_regex_is_not_anchored():
    """A compiled pattern is searched as given."""
    validator = Validators.pattern(re.compile("b"))
    assert validator(control_with_value("abc")) is None
    assert validator(control_with_value("xyz")) == {
        "pattern": {"required_pattern": "b", "actual_value": "xyz"}
    }


def test_pattern_empty_value_passes():
    assert Validators.pattern("[0-9]+")(control_with_value("")) is None


def test_pattern_none_is_null_validator():
    assert Validators.pattern(None) is Validators.null_validator


def test_email():
    assert Validators.email(control_with_value("user@example.com")) is None
    assert Validators.email(control_with_value("not-an-email")) == {"email": True}
    assert Validators.email(control_with_value("")) is None


def test_email_pattern_from_config():
    set_form_config(FormBindConfig(auto_drain_microtasks=False, email_pattern=r"^.+@corp\.local$"))
    assert Validators.email(control_with_value("me@corp.local")) is None
    assert Validators.email(control_with_value("me@example.com")) == {"email": True}


def test_null_validator():
    assert Validators.null_validator(control_with_value("anything")) is None


@pytest.mark.parametrize("value,expected", [
    (None, True), ("", True), ([], True), ({}, True), ("a", False), (0, False), (False, False),
])
def test_is_empty_input_value(value, expected):
    assert is_empty_input_value(value) is expected


def test_parse_float():
    assert parse_float(3) == 3.0
    assert parse_float("12px") == 12.0
    assert parse_float(".5") == 0.5
    assert parse_float("abc") != parse_float("abc")  # NaN
    assert parse_float(True) != parse_float(True)
