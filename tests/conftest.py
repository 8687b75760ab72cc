"""pytest configuration and fixtures for pyqt-formbind tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PyQt6.QtWidgets import QApplication

from pyqt_formbind.core import get_microtask_queue
from pyqt_formbind.protocols import FormBindConfig, set_form_config


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication instance for tests."""
    app = QApplication.instance() or QApplication([])
    yield app
    # Don't quit - may cause issues with other tests


@pytest.fixture(autouse=True)
def form_config():
    """Manual microtask draining; tests call flush_microtasks() themselves."""
    config = FormBindConfig(auto_drain_microtasks=False)
    set_form_config(config)
    yield config
    get_microtask_queue().clear()
    set_form_config(None)
