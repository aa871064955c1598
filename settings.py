from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance (GSC_ prefixed environment variables)
config = get_config_loader()

# Profile configuration file (YAML)
CONFIG_FILE = config.get("CONFIG_FILE", str(Path.home() / ".okta_snowflake_login_config"))
DEFAULT_PROFILE = config.get("PROFILE", "dev")

# Logging
LOG_LEVEL = config.get("LOG_LEVEL", "WARNING")
DEBUG_LOG_FILE = config.get("DEBUG_LOG_FILE", "gsc_debug.log")

# Okta HTTP configuration
HTTP_TIMEOUT = config.get("HTTP_TIMEOUT", 10.0)
# Scope requested from the Okta authorization server for Snowflake
OAUTH_SCOPE = config.get("OAUTH_SCOPE", "session:role-any")
# Reject an authorization code whose state does not match the one sent
VERIFY_STATE = config.get("VERIFY_STATE", True)

# MFA polling
MFA_POLL_INTERVAL = config.get("MFA_POLL_INTERVAL", 1.0)
# Upper bound on waiting for MFA approval, 0 waits forever
MFA_MAX_WAIT = config.get("MFA_MAX_WAIT", 300.0)

# Password storage
KEYRING_SERVICE = config.get("KEYRING_SERVICE", "gimme-snowflake-creds")

# Output locations
DBT_PROFILES_FILE = config.get("DBT_PROFILES_FILE", str(Path.home() / ".dbt" / "profiles.yml"))
GENERIC_CREDENTIALS_DIR = config.get("GENERIC_CREDENTIALS_DIR", str(Path.home() / ".gsc"))
