from __future__ import annotations

"""
Configuration Domain Management.

Handles the persistent JSON state of the tool: stored merge defaults and
named profiles (typically a project's fallback namespace order). Missing or
corrupted state falls back to built-in defaults.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from tinymerge.domain.constants import CURRENT_CONFIG_VERSION
from tinymerge.infra.fs import get_user_data_dir

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.json"


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default session configuration driving one merge.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "input_a": "",
        "input_b": "",
        "output_path": "",

        # Reconciliation
        "fallback_order": [],

        # Execution
        "overwrite": False,
        "dry_run": False,
    }


def get_default_app_state() -> Dict[str, Any]:
    """Generate the complete default structure of config.json."""
    return {
        "version": CURRENT_CONFIG_VERSION,
        "defaults": get_default_config(),
        "saved_profiles": {},
    }


def get_config_path() -> str:
    return os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_app_state(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load the application state from disk.

    Args:
        config_path: Explicit state file; defaults to the user data directory.

    Returns:
        Dict[str, Any]: The loaded state or a default structure on failure.
    """
    path = config_path or get_config_path()
    state = get_default_app_state()

    if not os.path.exists(path):
        logger.debug(f"Config file not found at {path}. Using defaults.")
        return state

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to load config {path}: {e}. Using defaults.")
        return state

    if not isinstance(data, dict):
        logger.warning(f"Corrupted config file {path}. Using defaults.")
        return state

    if isinstance(data.get("defaults"), dict):
        state["defaults"].update(data["defaults"])
    if isinstance(data.get("saved_profiles"), dict):
        state["saved_profiles"].update(data["saved_profiles"])

    state["version"] = CURRENT_CONFIG_VERSION
    return state


# -----------------------------------------------------------------------------
# Facade API
# -----------------------------------------------------------------------------
def load_config(profile: Optional[str] = None, config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Retrieve the effective session configuration.

    Layers built-in defaults, persisted defaults and, when requested, a
    saved profile. An unknown profile is logged and ignored.
    """
    state = load_app_state(config_path)
    config = get_default_config()
    config.update(state.get("defaults", {}))

    if profile:
        selected = state.get("saved_profiles", {}).get(profile)
        if isinstance(selected, dict):
            logger.debug(f"Applying profile '{profile}'.")
            config.update(selected)
        else:
            logger.warning(f"Profile '{profile}' not found in configuration. Ignored.")

    return config
