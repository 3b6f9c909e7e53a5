"""Shared fixtures for export comparison tests."""

import logging
import os

import pytest

from export_parity.utils.logger import PACKAGE_LOGGER_NAME
from tests.comparison.export_factory import ExportFactory


@pytest.fixture
def export_factory(tmp_path):
    """Factory writing export trees and archives under tmp_path."""
    return ExportFactory(tmp_path)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without configuration environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("EXPORT_PARITY_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers and levels that configure_logging() attached during a test."""
    yield
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    for name in list(logging.root.manager.loggerDict):
        if name.startswith(PACKAGE_LOGGER_NAME + "."):
            logging.getLogger(name).setLevel(logging.NOTSET)
