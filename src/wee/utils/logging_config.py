# wee/utils/logging_config.py
"""wee.utils.logging_config
==========================

Logging configuration for the wee editor. The module owns the two global
loggers used across the package and a single entry point, `setup_logging`,
that attaches handlers to them according to the ``[logging]`` section of the
configuration.

Features:
    - Rotating file log for all editor events (``editor.log``).
    - Optional console output to stderr with its own threshold.
    - Optional separate ``error.log`` receiving only ERROR and CRITICAL records.
    - Optional key trace (``keytrace.log``) for every dispatched input event,
      switched on by the ``WEE_KEYTRACE`` environment variable.
    - All log files live in ``log_dir`` (default: current directory); when it
      cannot be created the system temp directory is used instead.
    - Safe to call repeatedly: existing handlers are replaced, never stacked.

Globals:
    logger: Main editor logger ("wee").
    KEY_LOGGER: Logger for dispatched key events ("wee.keyevents").
"""

import logging
import logging.handlers
import os
import sys
import tempfile
from typing import Any, Optional


# ======================== Global loggers ========================
logger = logging.getLogger("wee")
KEY_LOGGER = logging.getLogger("wee.keyevents")

FILE_FORMAT = "%(asctime)s - %(levelname)-8s - %(name)-15s - %(message)s (%(filename)s:%(lineno)d)"
CONSOLE_FORMAT = "%(levelname)-8s - %(name)-12s - %(message)s"
KEYTRACE_ENV_VAR = "WEE_KEYTRACE"


def _resolve_log_dir(log_dir: str) -> str:
    """Returns a usable directory for log files, creating it if necessary."""
    if not log_dir:
        return ""
    try:
        os.makedirs(log_dir, exist_ok=True)
        return log_dir
    except OSError as e_mkdir:
        fallback = tempfile.gettempdir()
        print(
            f"Error creating log directory '{log_dir}': {e_mkdir}. Logging to '{fallback}'.",
            file=sys.stderr,
        )
        return fallback


def _rotating_handler(
    path: str, max_bytes: int, backups: int, level: int, fmt: str
) -> Optional[logging.Handler]:
    """Builds a rotating file handler, or returns None if the file cannot be opened."""
    try:
        handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backups, encoding="utf-8"
        )
    except Exception as e_fh:
        print(f"Error setting up log file '{path}': {e_fh}.", file=sys.stderr)
        return None
    handler.setFormatter(logging.Formatter(fmt))
    handler.setLevel(level)
    return handler


def _level(name: Any, default: int) -> int:
    return getattr(logging, str(name).upper(), default)


def setup_logging(config: Optional[dict[str, Any]] = None) -> None:
    """Configures editor-wide logging handlers and log levels.

    Handlers attached to the root logger, in this order:

    1. ``editor.log``: rotating (2 MB x 5), threshold ``file_level``
       (default DEBUG).
    2. stderr console: only when ``log_to_console`` is true, threshold
       ``console_level`` (default WARNING).
    3. ``error.log``: rotating (1 MB x 3) ERROR-only file, when
       ``separate_error_log`` is true.

    The ``wee.keyevents`` logger never propagates. It writes to
    ``keytrace.log`` when ``WEE_KEYTRACE`` is ``1``/``true``/``yes`` and is
    disabled otherwise.

    Args:
        config: Application configuration. Only ``config["logging"]`` is read;
            recognised keys are ``file_level``, ``console_level``,
            ``log_to_console``, ``separate_error_log`` and ``log_dir``.

    Notes:
        The function never raises. I/O problems are reported on stderr and
        logging continues with whatever handlers could be created.
    """
    logging_config = (config or {}).get("logging", {})
    log_dir = _resolve_log_dir(logging_config.get("log_dir", ""))
    file_level = _level(logging_config.get("file_level", "DEBUG"), logging.DEBUG)

    handlers: list[logging.Handler] = []

    main_handler = _rotating_handler(
        os.path.join(log_dir, "editor.log"), 2 * 1024 * 1024, 5, file_level, FILE_FORMAT
    )
    if main_handler:
        handlers.append(main_handler)

    if logging_config.get("log_to_console", True):
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        console_handler.setLevel(
            _level(logging_config.get("console_level", "WARNING"), logging.WARNING)
        )
        handlers.append(console_handler)

    if logging_config.get("separate_error_log", False):
        error_handler = _rotating_handler(
            os.path.join(log_dir, "error.log"), 1024 * 1024, 3, logging.ERROR, FILE_FORMAT
        )
        if error_handler:
            handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.handlers = handlers
    root_logger.setLevel(file_level)

    KEY_LOGGER.propagate = False
    KEY_LOGGER.setLevel(logging.DEBUG)
    KEY_LOGGER.handlers = []
    KEY_LOGGER.disabled = False

    if os.environ.get(KEYTRACE_ENV_VAR, "").lower() in {"1", "true", "yes"}:
        trace_path = os.path.join(log_dir, "keytrace.log")
        trace_handler = _rotating_handler(
            trace_path, 1024 * 1024, 3, logging.DEBUG, "%(asctime)s - %(message)s"
        )
        if trace_handler:
            KEY_LOGGER.addHandler(trace_handler)
            logging.info("Key event tracing enabled, logging to '%s'.", trace_path)
        else:
            KEY_LOGGER.disabled = True
    else:
        KEY_LOGGER.addHandler(logging.NullHandler())
        KEY_LOGGER.disabled = True
        logging.debug("Key event tracing is disabled.")

    logging.info(
        "Logging setup complete. Root level: %s, handlers: %s.",
        logging.getLevelName(root_logger.level),
        ", ".join(type(h).__name__ for h in handlers) or "none",
    )
