# tedit/utils/utils.py
"""
tedit.utils.utils
=================

Core utility functions for the tedit editor.

Key functionalities include:
- Robust Configuration Loading: a hardcoded, built-in default configuration
  is recursively merged with user-defined settings from
  `~/.config/tedit/config.toml`, so the editor always starts even when the
  user file is missing or corrupted.
- Helper Utilities: deep-merging of nested dictionaries.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import toml

logger = logging.getLogger("tedit")

# --- Constants ---
APP_NAME = "tedit"
APP_VERSION = "0.1.0"

# This dictionary is the ultimate fallback, ensuring the application can ALWAYS start.
DEFAULT_CONFIG: Dict[str, Any] = {
    "editor": {
        "show_line_numbers": False,
        # Presses of the quit key needed to leave with unsaved changes.
        "quit_times": 2,
        # Seconds a message-bar message stays visible.
        "message_timeout": 5,
    },
    "keybindings": {
        "quit": "ctrl+q",
        "save": "ctrl+s",
        "search": "ctrl+f",
        "show_line_numbers": "ctrl+l",
        "dismiss": "esc",
        "remove_line": "ctrl+x",
        "word_jump_left": "ctrl+left",
        "word_jump_right": "ctrl+right",
    },
    "logging": {
        "file_level": "DEBUG",
        "console_level": "WARNING",
        "log_to_console": False,
        "separate_error_log": False,
    },
}


# --- Helper Functions ---

def get_user_config_dir() -> Path:
    """Directory holding the user's `config.toml`."""
    return Path.home() / ".config" / APP_NAME


def load_config() -> Dict[str, Any]:
    """
    Loads and merges configurations, ensuring the application can always run.
    """
    final_config = deep_merge({}, DEFAULT_CONFIG)
    logger.debug("Loaded embedded default configuration.")

    user_config_path = get_user_config_dir() / "config.toml"
    if user_config_path.is_file():
        try:
            user_config = toml.load(user_config_path)
            final_config = deep_merge(final_config, user_config)
            logger.info(f"Successfully loaded and merged user config from {user_config_path}")
        except (toml.TomlDecodeError, OSError) as e:
            logger.error(f"Could not parse user config '{user_config_path}': {e}. Using defaults.")

    return final_config


def deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Recursively merges the `override` dictionary into the `base` dictionary.
    """
    result = base.copy()
    for key, value in override.items():
        if isinstance(result.get(key), dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result
