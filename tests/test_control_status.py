"""Tests for ControlStatusBinder."""

import gc

from PyQt6.QtCore import QEvent
from PyQt6.QtGui import QFocusEvent
from PyQt6.QtWidgets import QApplication, QLineEdit

from pyqt_formbind.core import flush_microtasks
from pyqt_formbind.directives import (
    STATUS_FLAGS,
    ControlStatusBinder,
    FormControlDirective,
    FormControlNameDirective,
    FormGroupDirective,
    ModelDirective,
    RequiredValidator,
    TemplateFormDirective,
)
from pyqt_formbind.model import FormControl, FormGroup
from pyqt_formbind.validation import Validators


def flags(widget, prefix="form_"):
    return {flag for flag in STATUS_FLAGS if widget.property(prefix + flag)}


def test_binder_tracks_control_state(qapp):
    form = FormGroup({"name": FormControl("", Validators.required)})
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit)
    ControlStatusBinder(edit, directive)
    flush_microtasks()
    gc.collect()

    assert flags(edit) == {"invalid", "pristine", "untouched"}

    edit.setText("Ada")
    assert flags(edit) == {"valid", "dirty", "untouched"}

    QApplication.sendEvent(edit, QFocusEvent(QEvent.Type.FocusOut))
    assert flags(edit) == {"valid", "dirty", "touched"}


def test_binder_waits_for_template_registration(qapp):
    form_dir = TemplateFormDirective()
    edit = QLineEdit()
    directive = ModelDirective("name", form_dir, edit, validators=[RequiredValidator()])
    binder = ControlStatusBinder(edit, directive, prefix="ng_")
    flush_microtasks()

    assert flags(edit, "ng_") == {"invalid", "pristine", "untouched"}

    binder.unbind()
    edit.setText("Ada")
    assert "invalid" in flags(edit, "ng_")


def test_binder_on_form_directive(qapp):
    form_dir = TemplateFormDirective()
    frame = QLineEdit()
    binder = ControlStatusBinder(frame, form_dir)
    binder.bind()
    assert flags(frame) == {"valid", "pristine", "untouched"}


def test_binder_follows_replaced_control(qapp):
    form = FormGroup({"name": FormControl("", Validators.required)})
    form_dir = FormGroupDirective(form)
    edit = QLineEdit()
    directive = FormControlNameDirective("name", form_dir, edit)
    ControlStatusBinder(edit, directive)
    flush_microtasks()
    assert "invalid" in flags(edit)

    replacement = FormControl("Ada")
    form.set_control("name", replacement)
    assert directive.control is replacement
    assert flags(edit) == {"valid", "pristine", "untouched"}

    replacement.mark_as_touched()
    assert "touched" in flags(edit)


def test_binder_follows_swapped_form(qapp):
    form_dir = FormGroupDirective(FormGroup({"name": FormControl("")}))
    frame = QLineEdit()
    ControlStatusBinder(frame, form_dir)
    flush_microtasks()
    assert "pristine" in flags(frame)

    swapped = FormGroup({"name": FormControl("x")})
    swapped.mark_as_dirty()
    form_dir.form = swapped
    assert "dirty" in flags(frame)


def test_binder_follows_standalone_control_swap(qapp):
    edit = QLineEdit()
    directive = FormControlDirective(FormControl("", Validators.required), edit)
    ControlStatusBinder(edit, directive)
    flush_microtasks()
    assert "invalid" in flags(edit)

    directive.form = FormControl("Ada")
    assert "valid" in flags(edit)
