"""Configuration loader for gimme-snowflake-creds

Loads configuration from multiple sources with the following priority:
1. Environment variables, prefixed with GSC_ (highest priority)
2. .env file
3. Hardcoded defaults (lowest priority)
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional
from dotenv import load_dotenv

# Set up logger for config loader
logger = logging.getLogger(__name__)

ENV_PREFIX = "GSC_"


class ConfigLoader:
    """Handles loading configuration from various sources"""

    def __init__(self, env_path: Optional[str] = None, prefix: str = ENV_PREFIX):
        """Initialize the config loader

        Args:
            env_path: Optional path to .env file.
                     Defaults to '.env' in the current directory.
            prefix: Prefix added to every environment variable name
        """
        self.env_path = Path(env_path) if env_path else Path(".env")
        self.prefix = prefix
        self._load_env_file()

    def _load_env_file(self):
        """Load environment variables from .env file if it exists"""
        if self.env_path.exists():
            load_dotenv(dotenv_path=self.env_path)
            logger.debug(f"Loaded environment variables from {self.env_path}")
        else:
            logger.debug(f".env file not found at {self.env_path}, using environment variables and defaults only")

    def env_name(self, name: str) -> str:
        """Environment variable name for a setting or profile field

        Args:
            name: Setting name, like 'okta-org' or 'LOG_LEVEL'

        Returns:
            Prefixed upper-case name, like 'GSC_OKTA_ORG'
        """
        return self.prefix + name.upper().replace("-", "_")

    def get(self, name: str, default: Any) -> Any:
        """Get a configuration value with priority: env > default

        Args:
            name: Setting name, without the prefix
            default: Default value if not found in environment

        Returns:
            The configuration value from environment or default
        """
        env_var = self.env_name(name)
        env_value = os.getenv(env_var)
        if env_value is not None:
            # Try to parse as appropriate type
            if isinstance(default, bool):
                return env_value.lower() in ('true', '1', 'yes')
            elif isinstance(default, int):
                try:
                    return int(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as int, using default: {default}")
                    return default
            elif isinstance(default, float):
                try:
                    return float(env_value)
                except ValueError:
                    logger.warning(f"Failed to parse {env_var}={env_value} as float, using default: {default}")
                    return default
            return env_value

        # Expand home directory if it's a path
        if isinstance(default, str) and default.startswith("~/"):
            return str(Path(default).expanduser())
        return default

    def get_raw(self, name: str) -> Optional[str]:
        """Get the raw environment value for a name, or None when unset"""
        return os.getenv(self.env_name(name))


# Create a global instance
_config_loader = None

def get_config_loader() -> ConfigLoader:
    """Get or create the global ConfigLoader instance"""
    global _config_loader
    if _config_loader is None:
        _config_loader = ConfigLoader()
    return _config_loader
