import os
from pathlib import Path
from typing import Optional

APP_NAME = "devprofile"

DEFAULT_PROFILE = "default"
KEYRING_SERVICE = "devprofile"

# keys are valid for 90 days, expiry stored as a plain date
KEY_VALID_IN_DAYS = 90
DATE_STRING_FORMAT = "%Y-%m-%d"

COLOR_AUTO = "auto"
COLOR_ON = "on"
COLOR_OFF = "off"

ENV_API_KEY = "STRIPE_API_KEY"
ENV_DEVICE_NAME = "STRIPE_DEVICE_NAME"
ENV_CONFIG_FILE = "DEVPROFILE_CONFIG_FILE"


def get_config_dir() -> Path:
    """get the directory holding the profiles file."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    return Path.home() / ".config" / APP_NAME


def get_profiles_file(override: Optional[str] = None) -> Path:
    """
    get the path of the profiles file.

    an explicit override wins, then the DEVPROFILE_CONFIG_FILE environment
    variable, then config.toml inside the config directory.
    """
    if override:
        return Path(override).expanduser()

    env_path = os.environ.get(ENV_CONFIG_FILE)
    if env_path:
        return Path(env_path).expanduser()

    return get_config_dir() / "config.toml"
