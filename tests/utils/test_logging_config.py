# tests/utils/test_logging_config.py
"""Unit tests for logging configuration utility.
=================================================

Tests for `tedit.utils.logging_config.setup_logging`:

- Rotating file handlers for the main log and, on request, a separate
  error log, with the configured levels.
- Console output only when `log_to_console` is set.
- Key tracing switched by the `TEDIT_KEYTRACE` environment variable.
- Repeated calls replace the root handlers instead of stacking them.

Every test runs in a temporary working directory so log files never touch the
repository, and the root logger is restored afterwards.
"""

import logging
import logging.handlers
from typing import Generator

import pytest

from tedit.utils import logging_config


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch) -> Generator[None, None, None]:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv(logging_config.KEYTRACE_ENV_VAR, raising=False)
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    for handler in logging_config.KEY_LOGGER.handlers:
        handler.close()
    root.handlers = saved_handlers
    root.setLevel(saved_level)


def test_setup_logging_creates_handlers(tmp_path) -> None:
    """Main and error rotating file handlers are attached with their levels."""
    logging_config.setup_logging(
        {
            "logging": {
                "file_level": "INFO",
                "console_level": "ERROR",
                "log_to_console": False,
                "separate_error_log": True,
            }
        }
    )

    root = logging.getLogger()
    names = {type(h).__name__ for h in root.handlers}

    assert "RotatingFileHandler" in names
    assert len(root.handlers) == 2
    assert root.handlers[0].level == logging.INFO
    assert root.handlers[1].level == logging.ERROR
    assert (tmp_path / logging_config.LOG_FILENAME).exists()
    assert (tmp_path / logging_config.ERROR_LOG_FILENAME).exists()


def test_defaults_write_only_the_main_log() -> None:
    logging_config.setup_logging(None)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0], logging.handlers.RotatingFileHandler)
    assert root.level == logging.DEBUG


def test_console_handler_when_requested() -> None:
    logging_config.setup_logging(
        {"logging": {"log_to_console": True, "console_level": "error"}}
    )

    consoles = [
        h
        for h in logging.getLogger().handlers
        if type(h) is logging.StreamHandler
    ]
    assert len(consoles) == 1
    assert consoles[0].level == logging.ERROR


def test_unknown_level_name_falls_back() -> None:
    logging_config.setup_logging({"logging": {"file_level": "chatty"}})
    assert logging.getLogger().handlers[0].level == logging.DEBUG


def test_repeated_setup_does_not_stack_handlers() -> None:
    logging_config.setup_logging({})
    logging_config.setup_logging({})
    assert len(logging.getLogger().handlers) == 1


def test_messages_reach_the_log_file(tmp_path) -> None:
    logging_config.setup_logging({})
    logging_config.logger.info("buffer loaded")
    for handler in logging.getLogger().handlers:
        handler.flush()

    content = (tmp_path / logging_config.LOG_FILENAME).read_text(encoding="utf-8")
    assert "buffer loaded" in content


def test_keytrace_disabled_by_default(tmp_path) -> None:
    logging_config.setup_logging({})

    assert logging_config.KEY_LOGGER.disabled
    assert not logging_config.KEY_LOGGER.propagate
    assert not (tmp_path / logging_config.KEYTRACE_FILENAME).exists()


@pytest.mark.parametrize("value", ["1", "true", "YES"])
def test_keytrace_enabled_by_environment(tmp_path, monkeypatch, value: str) -> None:
    monkeypatch.setenv(logging_config.KEYTRACE_ENV_VAR, value)
    logging_config.setup_logging({})

    key_logger = logging_config.KEY_LOGGER
    assert not key_logger.disabled
    key_logger.debug("key code 17")
    for handler in key_logger.handlers:
        handler.flush()

    trace = (tmp_path / logging_config.KEYTRACE_FILENAME).read_text(encoding="utf-8")
    assert "key code 17" in trace
    main_log = (tmp_path / logging_config.LOG_FILENAME).read_text(encoding="utf-8")
    assert "key code 17" not in main_log
