from __future__ import annotations

"""
Handler Factories.

Every handler built here is tagged so that reconfiguration removes only what
this package installed, leaving pytest's capture handlers and third-party
handlers alone.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import List, Optional

from notegraph4ai.infra.logging.config import LoggingConfig

_HANDLER_TAG_ATTR: str = "_notegraph4ai_handler"


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG_ATTR, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG_ATTR, False))


def build_sink_handlers(cfg: LoggingConfig) -> List[logging.Handler]:
    """
    Create the terminal handlers a QueueListener will fan out to.

    Args:
        cfg: Logging configuration.

    Returns:
        List[logging.Handler]: Tagged handlers; empty if every sink is off
                               or the log file cannot be opened.
    """
    handlers: List[logging.Handler] = []
    level = cfg.level_number

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        handlers.append(_tag_handler(console))

    if cfg.log_file:
        file_handler = _open_rotating_file(cfg)
        if file_handler is not None:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
            handlers.append(_tag_handler(file_handler))

    return handlers


def _open_rotating_file(cfg: LoggingConfig) -> Optional[RotatingFileHandler]:
    """Open the rotating log file, reporting on stderr when it cannot be created."""
    path = os.path.abspath(str(cfg.log_file))
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        return RotatingFileHandler(
            path,
            maxBytes=int(cfg.max_bytes),
            backupCount=int(cfg.backup_count),
            encoding="utf-8",
        )
    except OSError as e:
        sys.stderr.write(f"WARNING: Cannot open log file '{path}': {e}\n")
        return None
