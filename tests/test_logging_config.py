"""
Unit Tests - Logging Config
===========================
"""
import logging

import pytest

from code_insights.utils.logging_config import ColoredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_console_only_by_default(restore_root_logger):
    setup_logging(level=logging.DEBUG)

    handlers = restore_root_logger.handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0].formatter, ColoredFormatter)
    assert logging.getLogger("code_insights").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.WARNING


def test_file_handler_when_log_dir_given(restore_root_logger, tmp_path):
    log_dir = tmp_path / "logs"

    setup_logging(level=logging.INFO, log_dir=str(log_dir))
    logging.getLogger("code_insights.test").info("hello file")
    for handler in restore_root_logger.handlers:
        handler.flush()

    (log_file,) = log_dir.iterdir()
    assert "hello file" in log_file.read_text(encoding="utf-8")


def test_colored_formatter_wraps_level_colour():
    record = logging.LogRecord("code_insights", logging.ERROR, __file__, 1, "boom", None, None)

    text = ColoredFormatter().format(record)

    assert text.startswith(ColoredFormatter.red)
    assert text.endswith(ColoredFormatter.reset)
    assert "boom" in text
