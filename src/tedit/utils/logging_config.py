# tedit/utils/logging_config.py
"""tedit.utils.logging_config
============================

Logging configuration for the tedit editor.

Defines the global logger objects and ``setup_logging``, which attaches the
application handlers according to the ``[logging]`` section of the config.

Features:
    - Rotating file log (``editor.log``) for general editor events.
    - Optional console output to stderr. Off by default because curses owns
      the terminal while the editor runs.
    - Optional separate ``error.log`` holding only ERROR and CRITICAL events.
    - Optional key tracing (``keytrace.log``) enabled through the
      ``TEDIT_KEYTRACE`` environment variable.
    - Safe to call repeatedly: existing root handlers are replaced.

Globals:
    logger: Main application logger ("tedit").
    KEY_LOGGER: Logger for raw key-press trace events ("tedit.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("tedit")
KEY_LOGGER = logging.getLogger("tedit.keyevents")

LOG_FILENAME = "editor.log"
ERROR_LOG_FILENAME = "error.log"
KEYTRACE_FILENAME = "keytrace.log"
KEYTRACE_ENV_VAR = "TEDIT_KEYTRACE"

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"


def _level(name: Any, default: int) -> int:
    """Maps a level name such as ``"info"`` to its numeric value."""
    return getattr(logging, str(name).upper(), default)


def _rotating_handler(
    filename: str, max_bytes: int, backup_count: int
) -> logging.handlers.RotatingFileHandler:
    directory = os.path.dirname(filename)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)
    return logging.handlers.RotatingFileHandler(
        filename, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )


def keytrace_enabled() -> bool:
    return os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures application-wide logging handlers and log levels.

    Up to four independent handlers are installed:

    1. File handler: rotating ``editor.log`` from ``file_level`` upward.
    2. Console handler: optional stderr output at ``console_level``.
    3. Error-file handler: optional rotating ``error.log`` (ERROR and up).
    4. Key-event handler: rotating ``keytrace.log`` on ``tedit.keyevents``,
       only when ``TEDIT_KEYTRACE`` is ``1``, ``true`` or ``yes``.

    Args:
        config (dict | None): Application configuration. Only the
            ``["logging"]`` sub-section is consulted; recognised keys are
            ``file_level`` (default ``"DEBUG"``), ``console_level`` (default
            ``"WARNING"``), ``log_to_console`` (default ``False``) and
            ``separate_error_log`` (default ``False``).

    Notes:
        The function never raises. I/O and permission problems are reported
        to stderr and logging continues with whatever could be set up.
    """
    logging_config = (config or {}).get("logging", {})
    file_level = _level(logging_config.get("file_level", "DEBUG"), logging.DEBUG)
    file_formatter = logging.Formatter(FILE_FORMAT)

    handlers: list[logging.Handler] = []

    log_filename = LOG_FILENAME
    file_handler = None
    try:
        file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
    except OSError as e_fh:
        log_filename = os.path.join(tempfile.gettempdir(), LOG_FILENAME)
        print(
            f"Error setting up file logger: {e_fh}. Logging to '{log_filename}'.",
            file=sys.stderr,
        )
        try:
            file_handler = _rotating_handler(log_filename, 2 * 1024 * 1024, 5)
        except OSError as e_tmp:
            print(f"File logging disabled: {e_tmp}", file=sys.stderr)
    if file_handler:
        file_handler.setFormatter(file_formatter)
        file_handler.setLevel(file_level)
        handlers.append(file_handler)

    console_handler = None
    if logging_config.get("log_to_console", False):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(
            _level(logging_config.get("console_level", "WARNING"), logging.WARNING)
        )
        handlers.append(console_handler)

    if logging_config.get("separate_error_log", False):
        try:
            error_file_handler = _rotating_handler(ERROR_LOG_FILENAME, 1024 * 1024, 3)
            error_file_handler.setFormatter(file_formatter)
            error_file_handler.setLevel(logging.ERROR)
            handlers.append(error_file_handler)
        except OSError as e_efh:
            print(
                f"Error setting up separate error log '{ERROR_LOG_FILENAME}': {e_efh}.",
                file=sys.stderr,
            )

    root_logger = logging.getLogger()
    root_logger.handlers = []
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(file_level)

    # Key traces never reach the main log.
    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if keytrace_enabled():
        try:
            key_trace_handler = _rotating_handler(KEYTRACE_FILENAME, 1024 * 1024, 3)
            key_trace_handler.setFormatter(logging.Formatter("%(asctime)s - %(message)s"))
            KEY_LOGGER.addHandler(key_trace_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", KEYTRACE_FILENAME)
        except OSError as e_keytrace:
            logging.error(f"Failed to set up key trace logging: {e_keytrace}", exc_info=True)
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root logger level: %s.",
        logging.getLevelName(root_logger.level),
    )
    if file_handler:
        logging.info(f"File logging to '{log_filename}' at level: {logging.getLevelName(file_level)}.")
    if console_handler:
        logging.info(
            f"Console logging to stderr at level: {logging.getLevelName(console_handler.level)}."
        )
