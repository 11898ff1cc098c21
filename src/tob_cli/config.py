"""Configuration management for the transform-on-build CLI."""

import os
import json


CONFIG_DIR = os.path.expanduser("~/.tob-cli")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")

DEFAULT_CONFIG = {
    "project_file": "tob.yml",
    "verbose": False,
}


def ensure_config_exists():
    """Ensure the configuration directory and file exist."""
    if not os.path.exists(CONFIG_DIR):
        os.makedirs(CONFIG_DIR)

    if not os.path.exists(CONFIG_FILE):
        with open(CONFIG_FILE, "w") as f:
            json.dump(DEFAULT_CONFIG, f, indent=2)


def get_config():
    """Get the current configuration.

    Returns:
        dict: Current configuration, with defaults for missing keys.
    """
    ensure_config_exists()
    with open(CONFIG_FILE, "r") as f:
        config = json.load(f)
    return {**DEFAULT_CONFIG, **config}


def update_config(updates):
    """Update the configuration with new values.

    Args:
        updates (dict): Dictionary of configuration values to update.
    """
    config = get_config()
    config.update(updates)

    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)


def parse_config_value(key, raw_value):
    """Convert a ``key=value`` string from the command line to a config value.

    Args:
        key (str): Configuration key, must be a known key.
        raw_value (str): Value as typed by the user.

    Returns:
        The typed value.

    Raises:
        ValueError: If the key is unknown or the value cannot be converted.
    """
    if key not in DEFAULT_CONFIG:
        raise ValueError(f"Unknown configuration key '{key}'. Known keys: {', '.join(DEFAULT_CONFIG)}")

    if isinstance(DEFAULT_CONFIG[key], bool):
        lowered = raw_value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"'{key}' expects a boolean, got '{raw_value}'")
    return raw_value


def get_default_project_file():
    """Get the default project file name.

    Returns:
        str: Project file used when --project is not given.
    """
    return get_config().get("project_file", DEFAULT_CONFIG["project_file"])


def get_default_verbose():
    """Get whether tool output is shown by default.

    Returns:
        bool: Default for --verbose.
    """
    return bool(get_config().get("verbose", False))
