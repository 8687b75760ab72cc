"""Tests for reactive directives bound to caller-built control trees."""

import logging

import pytest
from PyQt6.QtCore import QEvent
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtWidgets import QApplication, QCheckBox, QComboBox, QLineEdit, QRadioButton, QWidget

from pyqt_formbind.accessors import RadioControlRegistry, RadioValueAccessor
from pyqt_formbind.directives import (
    CheckboxRequiredValidator,
    FormArrayNameDirective,
    FormControlDirective,
    FormControlNameDirective,
    FormGroupDirective,
    FormGroupNameDirective,
    RequiredValidator,
    TemplateFormDirective,
)
from pyqt_formbind.errors import FormConfigurationError
from pyqt_formbind.model import FormArray, FormControl, FormGroup, FormState
from pyqt_formbind.validation import Validators


def focus_out(widget):
    QApplication.sendEvent(widget, QFocusEvent(QEvent.Type.FocusOut))


def make_profile():
    return FormGroup({
        "name": FormControl("Ada", Validators.required),
        "address": FormGroup({"street": FormControl("Main")}),
        "tags": FormArray([FormControl("a"), FormControl("b")]),
    })


# ========== FORM GROUP DIRECTIVE ==========

def test_form_is_required(qapp):
    with pytest.raises(FormConfigurationError, match="expects a FormGroup instance"):
        FormGroupDirective(None)


def test_binding_is_synchronous(qapp):
    form = make_profile()
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit)

    assert edit.text() == "Ada"
    assert directive.control is form.get("name")
    assert form_dir.directives == (directive,)

    edit.setText("")
    assert form.invalid
    assert directive.errors == {"required": True}

    form.get("name").set_value("Grace")
    assert edit.text() == "Grace"


def test_missing_control_names_path(qapp):
    form_dir = FormGroupDirective(make_profile())
    with pytest.raises(FormConfigurationError, match="Cannot find control with name: 'missing'"):
        FormControlNameDirective("missing", form_dir, QLineEdit())

    address = FormGroupNameDirective("address", form_dir)
    with pytest.raises(FormConfigurationError, match="Cannot find control with path: 'address -> zip'"):
        FormControlNameDirective("zip", address, QLineEdit())


def test_parent_must_be_reactive(qapp):
    with pytest.raises(FormConfigurationError, match="must be used with a parent FormGroupDirective"):
        FormControlNameDirective("name", None, QLineEdit())
    with pytest.raises(FormConfigurationError, match="cannot be used under a template-driven parent"):
        FormControlNameDirective("name", TemplateFormDirective(), QLineEdit())
    with pytest.raises(FormConfigurationError, match="cannot be used under a template-driven parent"):
        FormGroupNameDirective("address", TemplateFormDirective())


def test_nested_group_and_array(qapp):
    form = make_profile()
    form_dir = FormGroupDirective(form)
    address = FormGroupNameDirective("address", form_dir)
    tags = FormArrayNameDirective("tags", form_dir)
    street_edit, tag_edit = QLineEdit(), QLineEdit()
    street = FormControlNameDirective("street", address, street_edit)
    second_tag = FormControlNameDirective(1, tags, tag_edit)

    assert address.control is form.get("address")
    assert tags.control is form.get("tags")
    assert street.path == ["address", "street"]
    assert second_tag.path == ["tags", "1"]
    assert street_edit.text() == "Main"
    assert tag_edit.text() == "b"

    tag_edit.setText("z")
    assert form.value["tags"] == ["a", "z"]
    assert tags.dirty
    assert form.dirty


def test_set_model_writes_pristine(qapp):
    form = make_profile()
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit, model="Lovelace")

    assert edit.text() == "Lovelace"
    assert form.value["name"] == "Lovelace"
    assert directive.pristine


def test_disabled_control_disables_widget(qapp):
    form = FormGroup({"code": FormControl(FormState("X1", disabled=True))})
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    FormControlNameDirective("code", form_dir, edit)

    assert edit.text() == "X1"
    assert not edit.isEnabled()
    form.get("code").enable()
    assert edit.isEnabled()
    form.get("code").disable()
    assert not edit.isEnabled()


def test_blur_and_submit_strategies(qapp):
    form = FormGroup({
        "lazy": FormControl("", update_on="blur"),
        "final": FormControl("", update_on="submit"),
    })
    form_dir = FormGroupDirective(form)
    lazy_edit, final_edit = QLineEdit(), QLineEdit()
    FormControlNameDirective("lazy", form_dir, lazy_edit)
    FormControlNameDirective("final", form_dir, final_edit)

    lazy_edit.setText("l")
    final_edit.setText("f")
    assert form.value == {"lazy": "", "final": ""}

    focus_out(lazy_edit)
    focus_out(final_edit)
    assert form.value == {"lazy": "l", "final": ""}
    assert form.get("lazy").touched
    assert form.get("final").untouched

    form_dir.on_submit()
    assert form.value == {"lazy": "l", "final": "f"}
    assert form.get("final").touched


# ========== RE-BINDING ==========

def test_replaced_control_is_rebound(qapp):
    form = make_profile()
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit)
    old = form.get("name")

    replacement = FormControl("new")
    form.set_control("name", replacement)

    assert directive.control is replacement
    assert edit.text() == "new"

    edit.setText("typed")
    assert replacement.value == "typed"
    assert old.value == "Ada"

    old.set_value("stale")
    assert edit.text() == "typed"


def test_removed_control_reports_later_edits(qapp, caplog):
    form = make_profile()
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    FormControlNameDirective("name", form_dir, edit)

    form.remove_control("name")
    with caplog.at_level(logging.WARNING, logger="pyqt_formbind.directives.shared"):
        edit.setText("orphan")

    assert "There is no control attached to form control element with path ['name']" in caplog.text
    assert "name" not in form.value


def test_swapping_form_rebinds_directives(qapp):
    first = FormGroup({"name": FormControl("first")})
    second = FormGroup({"name": FormControl("second")})
    form_dir = FormGroupDirective(first)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit)

    form_dir.form = second

    assert directive.control is second.get("name")
    assert edit.text() == "second"
    edit.setText("typed")
    assert second.value == {"name": "typed"}
    assert first.value == {"name": "first"}


def test_destroy_removes_directive_validators(qapp):
    form = FormGroup({"name": FormControl("")})
    form_dir = FormGroupDirective(form)
    directive = FormControlNameDirective("name", form_dir, QLineEdit(), validators=[RequiredValidator()])
    control = form.get("name")
    assert control.invalid

    directive.destroy()
    assert control.validator is None
    assert form_dir.directives == ()
    control.update_value_and_validity()
    assert control.valid


def test_group_directive_validators(qapp):
    def needs_tag(group):
        return None if group.value else {"empty": True}

    form = make_profile()
    form_dir = FormGroupDirective(form, validators=[lambda g: None])
    tags = FormArrayNameDirective("tags", form_dir, validators=[needs_tag])
    form.get("tags").clear()
    assert tags.errors == {"empty": True}

    tags.destroy()
    assert form.get("tags").validator is None
    assert form.get("tags").valid

    form_dir.destroy()
    assert form.validator is None


# ========== FORM CONTROL DIRECTIVE ==========

def test_form_control_directive_swap(qapp):
    edit = QLineEdit()
    first = FormControl("a")
    directive = FormControlDirective(first, edit)
    assert edit.text() == "a"
    assert directive.path == []

    second = FormControl("b")
    directive.form = second
    assert edit.text() == "b"
    edit.setText("c")
    assert second.value == "c"
    assert first.value == "a"


def test_form_control_directive_model(qapp):
    edit = QLineEdit()
    control = FormControl("")
    directive = FormControlDirective(control, edit, model="seed")
    assert edit.text() == "seed"
    assert control.pristine

    directive.set_model("other")
    assert control.value == "other"


# ========== WIDGET KINDS ==========

def test_checkbox_required(qapp):
    form = FormGroup({"agree": FormControl(False)})
    form_dir = FormGroupDirective(form)
    box = QCheckBox()
    FormControlNameDirective("agree", form_dir, box, validators=[CheckboxRequiredValidator()])
    assert form.get("agree").errors == {"required": True}

    box.click()
    assert form.value == {"agree": True}
    assert form.valid


def test_combo_box_binding(qapp):
    form = FormGroup({"color": FormControl("g")})
    form_dir = FormGroupDirective(form)
    combo = QComboBox()
    combo.addItem("Red", "r")
    combo.addItem("Green", "g")
    FormControlNameDirective("color", form_dir, combo)
    assert combo.currentIndex() == 1

    combo.setCurrentIndex(0)
    assert form.value == {"color": "r"}


def test_radio_group(qapp):
    registry = RadioControlRegistry()
    form = FormGroup({"drink": FormControl("tea")})
    form_dir = FormGroupDirective(form)
    # separate parents, so Qt's own auto-exclusivity does not group them
    tea_parent, coffee_parent = QWidget(), QWidget()
    tea = QRadioButton("Tea", tea_parent)
    coffee = QRadioButton("Coffee", coffee_parent)
    FormControlNameDirective("drink", form_dir, tea,
                             value_accessors=[RadioValueAccessor(tea, "tea", registry=registry)])
    FormControlNameDirective("drink", form_dir, coffee,
                             value_accessors=[RadioValueAccessor(coffee, "coffee", registry=registry)])

    assert tea.isChecked()
    assert not coffee.isChecked()
    assert len(registry) == 2

    coffee.click()
    assert form.value == {"drink": "coffee"}
    assert coffee.isChecked()
    assert not tea.isChecked()

    form.get("drink").set_value("tea")
    assert tea.isChecked()
    assert not coffee.isChecked()
