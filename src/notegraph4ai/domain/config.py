from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of application state, user preferences and
profiles using JSON. Missing keys are filled from defaults on load.
"""

import json
import logging
import os
from typing import Any, Dict

from notegraph4ai.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_DEPTH,
    DEFAULT_EXTENSIONS,
    DEFAULT_MODEL_KEY,
    DEFAULT_PROMPT_TEMPLATE,
)
from notegraph4ai.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


def get_config_path() -> str:
    """Absolute path of the persistent state file."""
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration (Session State).

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Source
        "vault_path": os.getcwd(),
        "note": "",
        "extensions": list(DEFAULT_EXTENSIONS),

        # Traversal
        "depth": DEFAULT_DEPTH,

        # Prompt
        "prompt_template": DEFAULT_PROMPT_TEMPLATE,
        "template_file": "",
        "raw_output": False,

        # Output
        "output_path": "",

        # Metrics
        "target_model": DEFAULT_MODEL_KEY,
        "count_tokens": True,
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default application state structure.

    Returns:
        Dict[str, Any]: The full JSON structure for config.json.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "app_settings": {
            "log_to_file": True,
            "log_level": "INFO",
        },
        "last_session": get_default_config(),
        "saved_profiles": {},
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_app_state() -> Dict[str, Any]:
    """
    Load application state from disk.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    default_state = get_default_app_state()
    config_file = get_config_path()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return default_state

    state = default_state
    for section in ("app_settings", "last_session", "saved_profiles"):
        if isinstance(data.get(section), dict):
            state[section].update(data[section])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    config_file = get_config_path()
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")

# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------

def load_config() -> Dict[str, Any]:
    """
    Retrieve the active configuration (Last Session) directly.
    """
    state = load_app_state()
    defaults = get_default_config()
    defaults.update(state.get("last_session", {}))
    return defaults


def save_config(config: Dict[str, Any]) -> None:
    """
    Save the provided config as the 'last_session'.
    """
    state = load_app_state()
    state["last_session"] = config
    save_app_state(state)
