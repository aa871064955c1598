"""Configuration management package for gimme-snowflake-creds"""

from .loader import ConfigLoader, get_config_loader
from .profiles import ConfigError, Configuration, Profile, load_configuration, running_in_docker

__all__ = [
    "ConfigLoader",
    "get_config_loader",
    "ConfigError",
    "Configuration",
    "Profile",
    "load_configuration",
    "running_in_docker",
]
