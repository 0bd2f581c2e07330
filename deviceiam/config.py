"""
Profile configuration for device-iam.

Profiles live in an INI file, one section per device:

    [default]
    connector = mycompany.devices:connect
    device_id = de-abcdefgh

    [profile kitchen]
    connector = mycompany.devices:connect
    device_id = de-ijklmnop
    assume_yes = false

`connector` names a callable that receives the remaining keys as keyword
arguments and returns an established connection.
"""

import configparser
import importlib
import os
from dataclasses import dataclass, field

DEFAULT_CONFIG_PATH = "~/.config/device-iam/config"
CONFIG_ENV_VAR = "DEVICE_IAM_CONFIG"
PROFILE_ENV_VAR = "DEVICE_IAM_PROFILE"
DEFAULT_PROFILE = "default"

# Keys consumed by device-iam itself; everything else goes to the connector
RESERVED_KEYS = ("connector", "assume_yes", "report_unknown_status")


class ConfigError(Exception):
    """Raised when the configuration cannot be used to reach a device."""


@dataclass
class Profile:
    name: str
    connector: str
    assume_yes: bool = False
    report_unknown_status: bool = False
    options: dict = field(default_factory=dict)


def get_config_path(override=None):
    """
    Get the configuration file path.

    Precedence: explicit override, then $DEVICE_IAM_CONFIG, then
    ~/.config/device-iam/config.
    """
    path = override or os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    return os.path.expanduser(path)


def get_profile_name(override=None):
    """Get the profile to use: override, then $DEVICE_IAM_PROFILE, then 'default'."""
    return override or os.environ.get(PROFILE_ENV_VAR) or DEFAULT_PROFILE


def read_config(config_file):
    """
    Read the configuration file.

    A missing file gives an empty configuration.

    Args:
        config_file: Path to config file

    Returns:
        ConfigParser object with config

    Raises:
        ConfigError: If the file exists but is not valid INI
    """
    config = configparser.ConfigParser(interpolation=None)
    config.optionxform = str  # Connector keyword arguments are case sensitive
    if os.path.exists(config_file):
        try:
            config.read(config_file)
        except configparser.Error as e:
            raise ConfigError(f"Cannot parse {config_file}: {e}") from e
    return config


def profile_section(profile_name):
    """Section name for a profile: 'default' or 'profile NAME'."""
    return DEFAULT_PROFILE if profile_name == DEFAULT_PROFILE else f"profile {profile_name}"


def list_profiles(config):
    """Return profile names in file order, without the 'profile ' prefix."""
    names = []
    for section in config.sections():
        if section == DEFAULT_PROFILE:
            names.append(section)
        elif section.startswith("profile "):
            names.append(section[len("profile ") :].strip())
    return names


def load_profile(config, profile_name):
    """
    Build a Profile from its configuration section.

    Args:
        config: ConfigParser from read_config()
        profile_name: Profile to load

    Returns:
        Profile: The parsed profile

    Raises:
        ConfigError: If the profile is missing, has no connector, or has an
            invalid boolean setting
    """
    section_name = profile_section(profile_name)
    if section_name not in config:
        raise ConfigError(f"Profile '{profile_name}' not found")

    section = config[section_name]
    connector = section.get("connector", "").strip()
    if not connector:
        raise ConfigError(f"Profile '{profile_name}' has no 'connector' setting")

    try:
        assume_yes = section.getboolean("assume_yes", fallback=False)
        report_unknown_status = section.getboolean("report_unknown_status", fallback=False)
    except ValueError as e:
        raise ConfigError(f"Profile '{profile_name}': {e}") from e

    options = {key: value for key, value in section.items() if key not in RESERVED_KEYS}

    return Profile(
        name=profile_name,
        connector=connector,
        assume_yes=assume_yes,
        report_unknown_status=report_unknown_status,
        options=options,
    )


def load_connector(path):
    """
    Import a connector given as 'package.module:callable'.

    Raises:
        ConfigError: If the path is malformed or cannot be imported
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise ConfigError(
            f"Invalid connector '{path}', expected the form 'package.module:callable'"
        )

    try:
        target = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import connector module '{module_name}': {e}") from e

    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError:
            raise ConfigError(f"Connector '{path}' not found in module '{module_name}'")

    if not callable(target):
        raise ConfigError(f"Connector '{path}' is not callable")
    return target


def open_connection(profile):
    """
    Open a connection for a profile using its connector.

    Raises:
        ConfigError: If the connector cannot be loaded or fails to connect
    """
    connector = load_connector(profile.connector)
    try:
        return connector(**profile.options)
    except Exception as e:
        raise ConfigError(f"Failed to connect using profile '{profile.name}': {e}") from e
