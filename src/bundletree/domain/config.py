from __future__ import annotations

"""
Configuration Domain Management.

Handles persistent storage of viewer preferences as JSON in the user data
directory. Missing keys are filled from defaults and corrupted files fall
back to the default configuration.
"""

import json
import logging
import os
from typing import Any, Dict

from bundletree.domain.constants import CURRENT_CONFIG_VERSION, DEFAULT_DECODABLE_EXTENSIONS
from bundletree.infra.fs import get_config_path

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default viewer configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Bundle reading
        "decodable_extensions": list(DEFAULT_DECODABLE_EXTENSIONS),

        # Expansion
        "expand_all": False,
        "expand_depth": 0,

        # Rendering
        "show_types": True,
        "max_value_length": 80,

        # Diagnostics
        "log_level": "INFO",
    }

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config() -> Dict[str, Any]:
    """
    Load the configuration from disk, merged over the defaults.

    Returns:
        Dict[str, Any]: The loaded configuration or the defaults on failure.
    """
    config = get_default_config()
    config_file = get_config_path()

    if not os.path.exists(config_file):
        logger.debug("Config file not found. Returning defaults.")
        return config

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config: {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning("Corrupted config file. Resetting to defaults.")
        return config

    viewer = data.get("viewer", {})
    if not isinstance(viewer, dict):
        logger.warning("Corrupted 'viewer' section in config file. Resetting to defaults.")
        return config

    config.update(viewer)
    return config


def save_config(config: Dict[str, Any]) -> None:
    """
    Persist the configuration to disk.

    Args:
        config: The configuration dictionary to save.
    """
    config_file = get_config_path()
    state = {"version": CURRENT_CONFIG_VERSION, "viewer": config}
    try:
        os.makedirs(os.path.dirname(config_file), exist_ok=True)
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(state, f, ensure_ascii=False, indent=4)
        logger.debug(f"Configuration saved to {config_file}")
    except OSError as e:
        logger.error(f"Failed to save configuration: {e}")
