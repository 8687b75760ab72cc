"""Shorthand construction of control trees from plain configuration."""

from typing import Any, Mapping, Optional, Sequence, Union

from pyqt_formbind.model.abstract_control import AbstractControl
from pyqt_formbind.model.form_array import FormArray
from pyqt_formbind.model.form_control import FormControl
from pyqt_formbind.model.form_group import FormGroup
from pyqt_formbind.model.status import UpdateOn


class FormBuilder:
    """
    Build FormGroup/FormArray/FormControl trees from nested configuration.

    Each entry of a group or array config is one of:
    - an AbstractControl, used as is
    - a tuple ``(value, validators[, async_validators])``
    - any other value, used as the initial value of a FormControl

    Examples:
        fb = FormBuilder()
        form = fb.group({
            "name": ("", Validators.required),
            "age": (None, [Validators.min(18)]),
            "tags": fb.array(["a", "b"]),
        }, update_on="blur")
    """

    def group(self, controls_config: Mapping[str, Any], validators=None, async_validators=None,
              update_on: Optional[Union[UpdateOn, str]] = None) -> FormGroup:
        controls = {name: self._create_control(config) for name, config in controls_config.items()}
        return FormGroup(controls, validators, async_validators, update_on=update_on)

    def control(self, form_state: Any = None, validators=None, async_validators=None,
                update_on: Optional[Union[UpdateOn, str]] = None) -> FormControl:
        return FormControl(form_state, validators, async_validators, update_on=update_on)

    def array(self, controls_config: Sequence[Any], validators=None, async_validators=None,
              update_on: Optional[Union[UpdateOn, str]] = None) -> FormArray:
        controls = [self._create_control(config) for config in controls_config]
        return FormArray(controls, validators, async_validators, update_on=update_on)

    def _create_control(self, config: Any) -> AbstractControl:
        if isinstance(config, AbstractControl):
            return config
        if isinstance(config, tuple):
            value = config[0] if len(config) > 0 else None
            validators = config[1] if len(config) > 1 else None
            async_validators = config[2] if len(config) > 2 else None
            return self.control(value, validators, async_validators)
        return self.control(config)
