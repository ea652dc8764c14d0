from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides cross-platform resolution of the application data directory,
path normalization and output persistence for composed prompts.
"""

import logging
import os

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "NoteGraph4AI"
UNIX_APP_DIR_NAME = ".notegraph4ai"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Windows: %LOCALAPPDATA%/NoteGraph4AI
    - Linux/Mac: ~/.notegraph4ai

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.debug(f"Could not create data directory '{path}': {e}")

    return os.path.abspath(path)


def normalize_path(path: str, fallback: str) -> str:
    """
    Expand user markers and make a path absolute.

    Args:
        path: Raw path, possibly empty or relative.
        fallback: Path used when path is empty.

    Returns:
        str: Absolute, normalized path.
    """
    raw = (path or "").strip() or fallback
    return os.path.abspath(os.path.expanduser(raw))

# -----------------------------------------------------------------------------
# OUTPUT PERSISTENCE
# -----------------------------------------------------------------------------

def write_text_file(path: str, content: str) -> None:
    """
    Write text to disk, creating parent directories as needed.

    Raises:
        OSError: If the file cannot be written.
    """
    out_dir = os.path.dirname(os.path.abspath(path))
    os.makedirs(out_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    logger.info(f"Output saved to file: {path}")


def read_text_file(path: str) -> str:
    """Read a UTF-8 text file, replacing undecodable bytes."""
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()
