"""Tests for template-driven directives and deferred registration."""

import pytest
from PyQt6.QtCore import QEvent
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication, QLineEdit, QPushButton

from pyqt_formbind.core import MicrotaskQueue, flush_microtasks, get_microtask_queue
from pyqt_formbind.directives import (
    FormGroupDirective,
    MinLengthValidator,
    ModelDirective,
    ModelGroupDirective,
    RequiredValidator,
    TemplateFormDirective,
)
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model import ControlStatus, FormGroup, UpdateOn


def focus_out(widget):
    QApplication.sendEvent(widget, QFocusEvent(QEvent.Type.FocusOut))


# ========== REGISTRATION ==========

def test_registration_is_deferred(qapp):
    form_dir = TemplateFormDirective()
    directive = ModelDirective("name", form_dir, QLineEdit())

    assert form_dir.form.get("name") is None
    assert form_dir.form.value == {}

    flush_microtasks()

    assert form_dir.form.get("name") is directive.control
    assert form_dir.form.value == {"name": None}
    assert directive.path == ["name"]
    assert form_dir.directives == (directive,)


def test_queue_drains_on_qt_event_loop(qapp, form_config):
    form_config.auto_drain_microtasks = True
    form_dir = TemplateFormDirective()
    ModelDirective("name", form_dir, QLineEdit())
    assert form_dir.form.get("name") is None

    QTest.qWait(20)
    assert form_dir.form.get("name") is not None


def test_injected_queue(qapp):
    queue = MicrotaskQueue()
    form_dir = TemplateFormDirective(queue=queue)
    ModelDirective("name", form_dir, QLineEdit())

    assert get_microtask_queue().pending == 0
    queue.flush()
    assert "name" in form_dir.form


def test_nested_group(qapp):
    form_dir = TemplateFormDirective()
    address = ModelGroupDirective("address", form_dir)
    street = ModelDirective("street", address, QLineEdit(), validators=[RequiredValidator()])
    assert address.control is None

    flush_microtasks()

    assert street.path == ["address", "street"]
    assert address.control is form_dir.form.get("address")
    assert form_dir.form.value == {"address": {"street": None}}
    assert form_dir.form.get("address.street").errors == {"required": True}
    assert form_dir.form.invalid


def test_group_validators_apply_to_group(qapp):
    def no_po_box(group):
        street = group.value.get("street") or ""
        return {"po_box": True} if street.lower().startswith("po box") else None

    form_dir = TemplateFormDirective()
    address = ModelGroupDirective("address", form_dir, validators=[no_po_box])
    edit = QLineEdit()
    ModelDirective("street", address, edit)
    flush_microtasks()

    edit.setText("PO Box 12")
    assert address.errors == {"po_box": True}
    assert form_dir.form.invalid


def test_same_name_shares_control(qapp):
    form_dir = TemplateFormDirective()
    first = ModelDirective("name", form_dir, QLineEdit())
    second = ModelDirective("name", form_dir, QLineEdit())
    flush_microtasks()

    assert first.control is second.control
    assert len(form_dir.form) == 1


def test_missing_name_is_reported(qapp):
    form_dir = TemplateFormDirective()
    with pytest.raises(FormConfigurationError, match="needs a name, or standalone=True, for control with unspecified name attribute"):
        ModelDirective(None, form_dir, QLineEdit())


def test_reactive_parent_is_rejected(qapp):
    form_dir = FormGroupDirective(FormGroup({}))
    with pytest.raises(FormConfigurationError, match="cannot register controls with a reactive parent"):
        ModelDirective("name", form_dir, QLineEdit())
    with pytest.raises(FormConfigurationError, match="ModelGroupDirective must be nested"):
        ModelGroupDirective("address", form_dir)


# ========== VALUE FLOW ==========

def test_view_to_model(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit)
    flush_microtasks()

    seen = []
    directive.model_changed.connect(seen.append)
    edit.setText("Ada")

    assert form_dir.form.value == {"name": "Ada"}
    assert directive.dirty
    assert form_dir.form.dirty
    assert seen == ["Ada"]


def test_set_model_writes_view_and_stays_pristine(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit, model="Grace")
    flush_microtasks()

    assert edit.text() == "Grace"
    assert directive.value == "Grace"
    assert directive.pristine
    assert form_dir.form.pristine

    directive.set_model("Grace")
    assert get_microtask_queue().pending == 0

    directive.set_model("Hopper")
    flush_microtasks()
    assert edit.text() == "Hopper"


def test_update_model(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit)
    flush_microtasks()

    form_dir.update_model(directive, "written")
    flush_microtasks()
    assert edit.text() == "written"


def test_blur_strategy(qapp):
    form_dir = TemplateFormDirective(update_on="blur")
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit)
    flush_microtasks()
    assert directive.control.update_on == UpdateOn.BLUR

    edit.setText("typed")
    assert directive.value is None
    assert directive.pristine

    focus_out(edit)
    assert directive.value == "typed"
    assert directive.dirty
    assert directive.touched


def test_per_control_update_on(qapp):
    form_dir = TemplateFormDirective()
    blur_edit, change_edit = QLineEdit(), QLineEdit()
    ModelDirective("lazy", form_dir, blur_edit, update_on="blur")
    ModelDirective("eager", form_dir, change_edit)
    flush_microtasks()

    blur_edit.setText("a")
    change_edit.setText("b")
    assert form_dir.form.value == {"lazy": None, "eager": "b"}


def test_submit_strategy(qapp):
    form_dir = TemplateFormDirective(update_on="submit")
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit)
    flush_microtasks()

    submitted = []
    form_dir.form_submitted.connect(submitted.append)
    edit.setText("typed")
    focus_out(edit)
    assert directive.value is None
    assert directive.untouched

    assert form_dir.on_submit() is False

    assert directive.value == "typed"
    assert directive.dirty
    assert directive.touched
    assert form_dir.submitted
    assert submitted == [None]


def test_submit_button(qapp):
    form_dir = TemplateFormDirective()
    button = QPushButton("OK")
    form_dir.attach_submit_button(button)
    button.click()
    assert form_dir.submitted


def test_reset_form(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit)
    flush_microtasks()
    edit.setText("dirty value")
    form_dir.on_submit()

    form_dir.reset_form({"name": "fresh"})

    assert edit.text() == "fresh"
    assert directive.pristine
    assert not form_dir.submitted

    reset_button = QPushButton("Reset")
    form_dir.attach_reset_button(reset_button)
    reset_button.click()
    assert edit.text() == ""


# ========== LIFECYCLE ==========

def test_destroy_removes_control(qapp):
    form_dir = TemplateFormDirective()
    directive = ModelDirective("name", form_dir, QLineEdit())
    address = ModelGroupDirective("address", form_dir)
    flush_microtasks()

    directive.destroy()
    address.destroy()
    flush_microtasks()

    assert form_dir.form.value == {}
    assert form_dir.directives == ()


def test_disabled_input(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit, disabled=True)
    flush_microtasks()

    assert directive.disabled
    assert not edit.isEnabled()
    assert form_dir.form.status == ControlStatus.DISABLED

    directive.set_disabled(False)
    flush_microtasks()
    assert directive.enabled
    assert edit.isEnabled()


def test_standalone_directive(qapp):
    edit = QLineEdit()
    directive = ModelDirective(widget=edit, model="solo")
    assert directive.is_standalone
    flush_microtasks()
    assert edit.text() == "solo"

    edit.setText("changed")
    assert directive.value == "changed"


def test_standalone_inside_form_is_not_registered(qapp):
    form_dir = TemplateFormDirective()
    ModelDirective(None, form_dir, QLineEdit(), standalone=True)
    flush_microtasks()
    assert form_dir.form.value == {}


# ========== VALIDATION ==========

def test_validator_directive_input_change_revalidates(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    min_len = MinLengthValidator(3)
    directive = ModelDirective("name", form_dir, edit, validators=[min_len])
    flush_microtasks()

    edit.setText("ab")
    assert directive.invalid
    assert directive.has_error("minlength")

    min_len.min_length = 2
    assert directive.valid
    assert form_dir.form.valid


def test_form_level_validator(qapp):
    def both_or_neither(group):
        value = group.value
        return {"both_or_neither": True} if bool(value.get("a")) != bool(value.get("b")) else None

    form_dir = TemplateFormDirective(validators=[both_or_neither])
    a, b = QLineEdit(), QLineEdit()
    ModelDirective("a", form_dir, a)
    ModelDirective("b", form_dir, b)
    flush_microtasks()

    a.setText("x")
    assert form_dir.errors == {"both_or_neither": True}
    b.setText("y")
    assert form_dir.valid
