"""Configuration file location.

The file lives at ``$XDG_CONFIG_HOME/cargo-clean-recursive/config.toml``,
falling back to ``~/.config/`` when the variable is unset or empty.
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "cargo-clean-recursive"

CONFIG_FILENAME = "config.toml"


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to config.toml under the XDG config home.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / APP_NAME / CONFIG_FILENAME
