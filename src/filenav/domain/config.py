from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of user preferences (scan filters and key
bindings) as JSON inside the user data directory. Missing or corrupted
files fall back to defaults; stored values are merged over defaults so new
keys always exist.
"""

import json
import logging
import os
from typing import Any, Dict, List

from filenav.core.components.filters import default_exclude_patterns
from filenav.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
CONFIG_FILE = os.path.join(get_user_data_dir(), "config.json")
CURRENT_CONFIG_VERSION = "1.0.0"

# Navigation actions understood by Filetree.handle_key
NAV_ACTIONS: List[str] = ["up", "down", "first", "last", "toggle"]


def default_key_bindings() -> Dict[str, List[str]]:
    """
    Get the default action -> key names mapping.

    Returns:
        Dict[str, List[str]]: Key names per navigation action.
    """
    return {
        "up": ["up", "k"],
        "down": ["down", "j"],
        "first": ["home", "g"],
        "last": ["end", "G"],
        "toggle": ["enter", "space", "l"],
    }


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Tree root
        "root_path": os.getcwd(),

        # Scan filtering
        "exclude_patterns": default_exclude_patterns(),
        "show_hidden": False,

        # Navigation
        "key_bindings": default_key_bindings(),
    }


def get_default_app_state() -> Dict[str, Any]:
    """
    Generate the complete default structure of config.json.

    Returns:
        Dict[str, Any]: Versioned state wrapping the settings block.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "settings": get_default_config(),
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

    if not os.path.exists(CONFIG_FILE):
        logger.debug("Config file not found. Returning defaults.")
        return default_state

    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return default_state

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return default_state

    settings = data.get("settings", {})
    if isinstance(settings, dict):
        bindings = settings.get("key_bindings")
        default_state["settings"].update(settings)
        # Merge bindings per action so partial overrides keep the other actions
        if isinstance(bindings, dict):
            merged = default_key_bindings()
            merged.update(bindings)
            default_state["settings"]["key_bindings"] = merged

    default_state["version"] = CURRENT_CONFIG_VERSION
    return default_state


def save_app_state(state: Dict[str, Any]) -> None:
    """
    Persist application state to disk.

    Args:
        state: The state dictionary to save.
    """
    try:
        os.makedirs(os.path.dirname(CONFIG_FILE), exist_ok=True)
        state["version"] = CURRENT_CONFIG_VERSION
        with open(CONFIG_FILE, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {CONFIG_FILE}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """Retrieve the active settings block directly."""
    return load_app_state()["settings"]


def save_config(config: Dict[str, Any]) -> None:
    """Save the provided settings block."""
    state = load_app_state()
    state["settings"] = config
    save_app_state(state)
