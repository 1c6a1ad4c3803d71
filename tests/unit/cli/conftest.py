"""Pytest configuration for CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_app_logger():
    """Undo the handlers and level _configure_logging puts on the app logger."""
    app_logger = logging.getLogger("canvas_pages")
    handlers = list(app_logger.handlers)
    level = app_logger.level
    yield
    for handler in app_logger.handlers[:]:
        if handler not in handlers:
            app_logger.removeHandler(handler)
            handler.close()
    app_logger.setLevel(level)
