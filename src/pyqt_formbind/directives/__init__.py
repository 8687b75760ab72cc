"""
Directive-binding protocol.

Template-driven directives create and register controls on the microtask
queue; reactive directives bind widgets to a control tree built by the
caller.
"""

from .abstract_directives import (
    ContainerKind,
    AbstractControlDirective,
    ControlContainer,
    AbstractFormDirective,
    ControlDirective,
)
from .shared import (
    set_up_control,
    clean_up_control,
    set_up_form_container,
    clean_up_form_container,
    set_up_validators,
    clean_up_validators,
    select_value_accessor,
    sync_pending_controls,
    control_path,
)
from .template_form import TemplateFormDirective, ModelGroupDirective, ModelDirective
from .reactive_forms import (
    FormGroupDirective,
    FormControlDirective,
    FormControlNameDirective,
    FormGroupNameDirective,
    FormArrayNameDirective,
)
from .validator_directives import (
    RequiredValidator,
    CheckboxRequiredValidator,
    EmailValidator,
    MinLengthValidator,
    MaxLengthValidator,
    PatternValidator,
    MinValidator,
    MaxValidator,
)
from .control_status import ControlStatusBinder, STATUS_FLAGS

__all__ = [
    "ContainerKind",
    "AbstractControlDirective",
    "ControlContainer",
    "AbstractFormDirective",
    "ControlDirective",
    "set_up_control",
    "clean_up_control",
    "set_up_form_container",
    "clean_up_form_container",
    "set_up_validators",
    "clean_up_validators",
    "select_value_accessor",
    "sync_pending_controls",
    "control_path",
    "TemplateFormDirective",
    "ModelGroupDirective",
    "ModelDirective",
    "FormGroupDirective",
    "FormControlDirective",
    "FormControlNameDirective",
    "FormGroupNameDirective",
    "FormArrayNameDirective",
    "RequiredValidator",
    "CheckboxRequiredValidator",
    "EmailValidator",
    "MinLengthValidator",
    "MaxLengthValidator",
    "PatternValidator",
    "MinValidator",
    "MaxValidator",
    "ControlStatusBinder",
    "STATUS_FLAGS",
]
