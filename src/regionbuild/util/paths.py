# src/regionbuild/util/paths.py: XDG-compliant path resolution.
# Resolves the per-user config and state directories through platformdirs and
# expands '~' and environment variables in user-supplied paths.

import os
from pathlib import Path

import platformdirs

APP_NAME = "regionbuild"
CONFIG_FILENAME = "strategy.yaml"
STATE_FILENAME = "last_built.json"

def get_xdg_config_home() -> Path:
    """Get the XDG_CONFIG_HOME path for the application."""
    return Path(platformdirs.user_config_dir(APP_NAME))

def get_xdg_state_home() -> Path:
    """Get the XDG_STATE_HOME path for the application."""
    return Path(platformdirs.user_state_dir(APP_NAME))

def get_default_config_path() -> Path:
    return get_xdg_config_home() / CONFIG_FILENAME

def get_default_state_path() -> Path:
    return get_xdg_state_home() / STATE_FILENAME

def expand_path(path: str | Path) -> Path:
    """Expand environment variables and user home directory in a path."""
    return Path(os.path.expandvars(os.path.expanduser(str(path)))).resolve()
