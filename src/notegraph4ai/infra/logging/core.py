from __future__ import annotations

"""
Logging Lifecycle.

The root logger receives a single QueueHandler; a QueueListener thread drains
the queue into the console and file sinks, so traversal code never blocks on
log I/O. configure_logging() is idempotent unless forced.
"""

import atexit
import logging
import os
import queue
from logging.handlers import QueueHandler, QueueListener
from typing import Optional

from notegraph4ai.infra.fs import get_user_data_dir
from notegraph4ai.infra.logging.config import LoggingConfig
from notegraph4ai.infra.logging.handlers import _is_our_handler, _tag_handler, build_sink_handlers

_CONFIGURED_FLAG_ATTR: str = "_notegraph4ai_configured"
_QUEUE_LISTENER_ATTR: str = "_notegraph4ai_queue_listener"

DEFAULT_LOG_FILE_NAME = "notegraph4ai.log"


def get_default_log_path(file_name: str = DEFAULT_LOG_FILE_NAME) -> str:
    """Location of the persistent log inside the user data directory."""
    return os.path.join(get_user_data_dir(), "logs", file_name)


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """
    Install the queue-based logging pipeline on the root logger.

    Args:
        cfg: Sinks, level and formats.
        force: Tear down a previous setup made by this function and rebuild it.

    Returns:
        logging.Logger: The root logger.
    """
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    _teardown(root)
    root.setLevel(cfg.level_number)

    sinks = build_sink_handlers(cfg)
    if not sinks:
        return root

    log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
    listener = QueueListener(log_queue, *sinks, respect_handler_level=True)
    listener.start()

    root.addHandler(_tag_handler(QueueHandler(log_queue)))
    setattr(root, _QUEUE_LISTENER_ATTR, listener)
    setattr(root, _CONFIGURED_FLAG_ATTR, True)

    # Drain pending records at interpreter exit
    atexit.register(_safe_stop_listener, listener)
    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def get_recent_logs(n_lines: int = 100, log_path: Optional[str] = None) -> str:
    """
    Return the last lines of a log file.

    Args:
        n_lines: How many trailing lines to return.
        log_path: File to read; defaults to get_default_log_path().
    """
    log_path = log_path or get_default_log_path()
    if not os.path.exists(log_path):
        return "Log file not found."

    try:
        with open(log_path, "r", encoding="utf-8", errors="replace") as f:
            return "".join(f.readlines()[-n_lines:])
    except OSError as e:
        return f"Error retrieving logs: {e}"


def _teardown(root: logging.Logger) -> None:
    """Remove our handlers and stop our listener, if any."""
    for handler in list(root.handlers):
        if _is_our_handler(handler):
            root.removeHandler(handler)
            handler.close()

    listener = getattr(root, _QUEUE_LISTENER_ATTR, None)
    if listener is not None:
        _safe_stop_listener(listener)
        for sink in listener.handlers:
            sink.close()
        setattr(root, _QUEUE_LISTENER_ATTR, None)


def _safe_stop_listener(listener: Optional[QueueListener]) -> None:
    # Both atexit and a forced reconfiguration may reach an already stopped listener
    if listener is not None and getattr(listener, "_thread", None) is not None:
        listener.stop()
