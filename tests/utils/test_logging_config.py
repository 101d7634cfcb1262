# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for the logging setup utility in `wee.utils.logging_config`.

This module verifies that `setup_logging`:
- Creates rotating file handlers for the main log and a separate error log
  when `separate_error_log` is enabled.
- Honors the configured levels for each handler.
- Adds a console handler only when `log_to_console` is true.
- Routes key events to `keytrace.log` only when `WEE_KEYTRACE` is set.

All log files go to a temporary directory; the root logger is restored after
each test.
"""

import logging
import logging.handlers
import os
from unittest.mock import patch

import pytest

from wee.utils import logging_config


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    key_logger = logging_config.KEY_LOGGER
    saved_key = (key_logger.handlers[:], key_logger.disabled, key_logger.propagate)
    yield
    for handler in root.handlers + key_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()
    root.handlers, root.level = saved_handlers, saved_level
    key_logger.handlers, key_logger.disabled, key_logger.propagate = saved_key


def test_setup_logging_creates_handlers(tmp_path) -> None:
    """`setup_logging` should add rotating file handlers with proper levels."""
    logging_config.setup_logging(
        {
            "logging": {
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
                "log_dir": str(tmp_path),
            }
        }
    )

    root = logging.getLogger()
    assert len(root.handlers) == 2
    assert all(type(h).__name__ == "RotatingFileHandler" for h in root.handlers)

    main_handler, error_handler = root.handlers
    assert main_handler.level == logging.INFO
    assert error_handler.level == logging.ERROR
    assert root.level == logging.INFO
    assert os.path.exists(tmp_path / "editor.log")
    assert os.path.exists(tmp_path / "error.log")


def test_console_handler_is_optional(tmp_path) -> None:
    logging_config.setup_logging(
        {"logging": {"log_to_console": True, "console_level": "ERROR", "log_dir": str(tmp_path)}}
    )
    root = logging.getLogger()
    stream_handlers = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert stream_handlers[0].level == logging.ERROR


def test_repeated_setup_does_not_stack_handlers(tmp_path) -> None:
    config = {"logging": {"log_to_console": False, "log_dir": str(tmp_path)}}
    logging_config.setup_logging(config)
    logging_config.setup_logging(config)
    assert len(logging.getLogger().handlers) == 1


def test_key_trace_enabled_by_environment(tmp_path, monkeypatch) -> None:
    monkeypatch.setenv("WEE_KEYTRACE", "1")
    logging_config.setup_logging({"logging": {"log_to_console": False, "log_dir": str(tmp_path)}})

    key_logger = logging_config.KEY_LOGGER
    assert key_logger.disabled is False
    assert key_logger.propagate is False
    assert [type(h).__name__ for h in key_logger.handlers] == ["RotatingFileHandler"]
    assert os.path.exists(tmp_path / "keytrace.log")


def test_key_trace_disabled_by_default(tmp_path, monkeypatch) -> None:
    monkeypatch.delenv("WEE_KEYTRACE", raising=False)
    logging_config.setup_logging({"logging": {"log_to_console": False, "log_dir": str(tmp_path)}})

    key_logger = logging_config.KEY_LOGGER
    assert key_logger.disabled is True
    assert not os.path.exists(tmp_path / "keytrace.log")


def test_unusable_log_dir_falls_back_to_temp(capsys) -> None:
    with (
        patch("wee.utils.logging_config.os.makedirs", side_effect=OSError("read-only")),
        patch("wee.utils.logging_config.tempfile.gettempdir", return_value="/fallback"),
    ):
        assert logging_config._resolve_log_dir("/nope/logs") == "/fallback"
    assert "read-only" in capsys.readouterr().err
