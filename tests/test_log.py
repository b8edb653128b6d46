"""Tests for logging setup."""

import logging

import pytest
from rich.logging import RichHandler
from textual.logging import TextualHandler

from fountainnav.log import configure_logging, get_logger


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def installed(root, kind):
    return [h for h in root.handlers if isinstance(h, kind)]


def test_repeated_calls_keep_one_handler(restore_root_logger):
    configure_logging("info")
    handler = configure_logging("debug")

    assert installed(restore_root_logger, RichHandler) == [handler]
    assert restore_root_logger.level == logging.DEBUG


def test_tui_handler_replaces_console_handler(restore_root_logger):
    configure_logging()
    handler = configure_logging(tui=True)

    assert isinstance(handler, TextualHandler)
    assert installed(restore_root_logger, RichHandler) == []
    assert installed(restore_root_logger, TextualHandler) == [handler]
    assert restore_root_logger.level == logging.WARNING


def test_other_handlers_are_left_alone(restore_root_logger):
    other = logging.NullHandler()
    restore_root_logger.addHandler(other)

    configure_logging()
    configure_logging()

    assert other in restore_root_logger.handlers
    assert len(installed(restore_root_logger, RichHandler)) == 1


def test_unknown_level_is_rejected():
    with pytest.raises(ValueError):
        configure_logging("verbose")


def test_get_logger_is_named():
    assert get_logger("fountainnav.outline").name == "fountainnav.outline"
