"""Tests for validator composition and ValidatorSet."""

import pytest

from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model import FormControl
from pyqt_formbind.validation import ValidatorSet, Validators, compose, merge_errors


def fails_with(errors):
    return lambda control: errors


def test_compose_empty_returns_none():
    """No validators left after filtering means no validation."""
    assert compose([]) is None
    assert compose(None) is None
    assert compose([None, None]) is None


def test_compose_all_pass_returns_none():
    composed = compose([Validators.null_validator, None, Validators.required])
    assert composed(FormControl("x")) is None


def test_compose_merges_errors():
    composed = compose([Validators.required, Validators.min_length(3), fails_with({"custom": 1})])
    assert composed(FormControl("")) == {"required": True, "custom": 1}
    assert composed(FormControl("ab")) == {
        "minlength": {"required_length": 3, "actual_length": 2},
        "custom": 1,
    }


def test_compose_later_validator_wins_on_key_collision():
    composed = compose([fails_with({"shared": "first"}), fails_with({"shared": "second"})])
    assert composed(FormControl(None)) == {"shared": "second"}


def test_compose_null_iff_every_validator_null():
    validators = [Validators.min(3), Validators.max(10)]
    composed = compose(validators)
    for value in (1, 5, 20):
        control = FormControl(value)
        expected_null = all(v(control) is None for v in validators)
        assert (composed(control) is None) == expected_null


def test_compose_rejects_non_callable():
    """Malformed validators fail at registration, not at validation time."""
    with pytest.raises(FormConfigurationError):
        compose([Validators.required, "required"])


def test_merge_errors_empty_maps_mean_no_errors():
    assert merge_errors([None, {}, None]) is None
    assert merge_errors([{"a": 1}, None, {"b": 2}]) == {"a": 1, "b": 2}


def test_validator_set_generation_bumps_on_change():
    holder = ValidatorSet([Validators.required])
    generation = holder.generation

    holder.add(Validators.required)  # already present
    assert holder.generation == generation

    holder.add(Validators.email)
    assert holder.generation == generation + 1
    assert len(holder) == 2

    holder.remove(Validators.min_length(2))  # never added
    assert holder.generation == generation + 1

    holder.remove(Validators.required)
    assert holder.generation == generation + 2
    assert holder.validators == (Validators.email,)


def test_validator_set_composed_tracks_contents():
    holder = ValidatorSet()
    assert holder.composed is None
    holder.set(Validators.required)
    assert holder.composed(FormControl("")) == {"required": True}
    holder.clear()
    assert holder.composed is None
    assert not holder.has(Validators.required)


def test_validator_set_rejects_non_callable():
    with pytest.raises(FormConfigurationError):
        ValidatorSet([42])
