from __future__ import annotations

"""
Logging Configuration Models.

LoggingConfig describes the sinks of one run. It is usually derived from the
persisted 'app_settings' section, with CLI flags taking precedence.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

_LEVEL_MAP: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(level: Any) -> int:
    """Map a level name to its numeric value; unknown names mean INFO."""
    if not level:
        return logging.INFO
    return _LEVEL_MAP.get(str(level).strip().upper(), logging.INFO)


@dataclass(frozen=True)
class LoggingConfig:
    """
    Sinks and formats for the logging subsystem.

    Attributes:
        level: Minimum severity name.
        console: Mirror records to stderr.
        log_file: Rotating log file path, or None for console only.
        max_bytes: Size at which the log file rolls over.
        backup_count: Rolled-over files to keep.
    """
    level: str = "INFO"
    console: bool = True
    log_file: Optional[str] = None

    max_bytes: int = 1024 * 1024
    backup_count: int = 3

    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @property
    def level_number(self) -> int:
        return parse_level(self.level)

    @classmethod
    def from_settings(
            cls,
            settings: Mapping[str, Any],
            *,
            debug: bool = False,
            log_file: Optional[str] = None,
            default_log_file: Optional[str] = None,
    ) -> LoggingConfig:
        """
        Build a config from the persisted 'app_settings' section.

        Args:
            settings: Mapping with optional 'log_level' and 'log_to_file'.
            debug: Force DEBUG regardless of the stored level.
            log_file: Explicit log file; wins over 'log_to_file'.
            default_log_file: File used when 'log_to_file' is set.
        """
        level = "DEBUG" if debug else str(settings.get("log_level") or "INFO")
        target = log_file
        if not target and settings.get("log_to_file"):
            target = default_log_file
        return cls(level=level, console=True, log_file=target or None)
