from __future__ import annotations

import logging

import pytest

from common.logging import configure_logging


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("_restore_root_logger")
def test_configure_logging_sets_root_level_case_insensitively():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG

    configure_logging(logging.WARNING)
    assert logging.getLogger().level == logging.WARNING


@pytest.mark.usefixtures("_restore_root_logger")
def test_configure_logging_quiets_httpx():
    configure_logging("DEBUG")
    assert logging.getLogger("httpx").level == logging.WARNING


@pytest.mark.usefixtures("_restore_root_logger")
def test_configure_logging_unknown_level_uses_info():
    configure_logging("verbose")
    assert logging.getLogger().level == logging.INFO
