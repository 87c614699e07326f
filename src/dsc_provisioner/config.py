"""
Manage the configuration of the tool
"""

import os
from pathlib import Path

import yaml

from .constants import AppInfo

DEFAULT_CONFIG = {
    "LOG_FILE_PATH": str(Path.home() / ".cache" / AppInfo.name / "dsc_provisioner.log"),
    "LOG_LEVEL": "INFO",
    # Definitions checked when the CLI is run without arguments
    "DEFINITION_FILE": "machines.yaml",
    # Shared defaults merged under every dsc provisioner of a definition
    "PROVISIONER_DEFAULTS": {},
}


def get_log_path(config=None) -> Path:
    """
    Returns the path to the log file as specified in the configuration,
    ensuring its parent directory exists.
    Reads the config file unless an already loaded config is given.
    """
    if config is None:
        config = load_config()
    log_file_path_str = config.get("LOG_FILE_PATH", DEFAULT_CONFIG["LOG_FILE_PATH"])
    log_path = Path(log_file_path_str)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    return log_path


def get_config_paths():
    """Returns the potential paths for the config file."""
    return [
        Path.home() / ".config" / AppInfo.name / "config.yaml",
        Path("/etc") / AppInfo.name / "config.yaml",
    ]


def get_user_config_path():
    """Returns the path to the user's config file."""
    return get_config_paths()[0]


def load_config():
    """
    Loads the configuration from the first found config file.
    If no config file is found, returns the default configuration.
    Merges the loaded configuration with default values to ensure all keys are present.
    """
    config_paths = get_config_paths()
    config_path = None
    user_config = {}

    for path in config_paths:
        if path.exists():
            config_path = path
            break

    if config_path:
        with open(config_path, encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}

    # Start with default config and update with user's config
    config = DEFAULT_CONFIG.copy()
    if user_config:
        config.update(user_config)
        # If user sets a value to null in yaml, it becomes None. Revert to default.
        for key, value in config.items():
            if value is None and key in DEFAULT_CONFIG:
                config[key] = DEFAULT_CONFIG[key]

    if not isinstance(config.get("PROVISIONER_DEFAULTS"), dict):
        config["PROVISIONER_DEFAULTS"] = {}

    return config


def save_config(config):
    """Saves the configuration to the user's config file."""
    config_path = get_user_config_path()
    os.makedirs(config_path.parent, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False)


def get_provisioner_defaults(config=None):
    """Returns the shared dsc provisioner settings from the user's config."""
    if config is None:
        config = load_config()
    return dict(config.get("PROVISIONER_DEFAULTS") or {})


def init_user_config(force=False):
    """
    Writes the default configuration to the user's config file.
    Returns the path written, or None if the file already exists and force is False.
    """
    config_path = get_user_config_path()
    if config_path.exists() and not force:
        return None
    save_config(DEFAULT_CONFIG.copy())
    return config_path
