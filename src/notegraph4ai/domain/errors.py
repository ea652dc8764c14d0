from __future__ import annotations

"""
Domain Exception Hierarchy.

Failures raised by the vault collaborators. Inside a traversal both kinds
are node-local: the engine converts them into diagnostics and keeps going.
Only an unreadable root escapes to the caller.
"""

from typing import Optional


class NoteGraphError(Exception):
    """Base class for all application errors."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class ReadError(NoteGraphError):
    """Document content could not be read."""


class ResolutionError(NoteGraphError):
    """Backlink or forward-link metadata could not be queried."""
