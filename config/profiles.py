"""Profile configuration for gimme-snowflake-creds

Profiles live in a YAML file (``~/.okta_snowflake_login_config`` by
default)::

    default: dev
    driver-name: SnowflakeDSIIDriver
    driver-path: /opt/snowflake/odbc/lib/libSnowflake.so
    dev:
      oauth: true
      account: xy12345.us-east-1
      database: ANALYTICS
      warehouse: COMPUTE_WH
      role: ANALYST
      odbc-path: ~/Library/ODBC
      okta-org: https://example.okta.com
      issuer-url: https://example.okta.com/oauth2/abc123
      client-id: 0oa1b2c3d4
      redirect-uri: https://example.com/callback
      username: jane@example.com

Each field can be overridden with a GSC_ environment variable
(``GSC_OKTA_ORG``) or a command-line flag, in that order of precedence:
flag > environment > file > default.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from .loader import ConfigLoader, get_config_loader

logger = logging.getLogger(__name__)

GLOBAL_FIELDS = ("driver-name", "driver-path")
OAUTH_FIELDS = ("okta-org", "client-id", "issuer-url", "redirect-uri")
DOCKER_ODBC_PATH = "/root/Library/ODBC"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class ConfigError(Exception):
    """Raised when the profile configuration is missing or invalid"""

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        self.fields = fields or []
        super().__init__(message)


class Profile(BaseModel):
    """Settings of one named profile"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    oauth: bool = False
    generic: bool = False
    account: str
    database: str
    warehouse: str
    schema_name: str = Field(default="PUBLIC", alias="schema")
    dbt_profile: Optional[str] = Field(default=None, alias="dbt-profile")
    threads: int = 10
    client_session_keep_alive: bool = False
    okta_org: Optional[str] = Field(default=None, alias="okta-org")
    odbc_path: str = Field(alias="odbc-path")
    client_id: Optional[str] = Field(default=None, alias="client-id")
    role: str
    issuer_url: Optional[str] = Field(default=None, alias="issuer-url")
    redirect_uri: Optional[str] = Field(default=None, alias="redirect-uri")
    username: str

    @field_validator("username")
    @classmethod
    def _check_username(cls, value: str) -> str:
        if not _EMAIL_RE.match(value):
            raise ValueError("must be an e-mail address")
        return value

    @field_validator("okta_org", "issuer_url")
    @classmethod
    def _check_url(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("must be an http(s) URL")
        return value.rstrip("/")

    @field_validator("redirect_uri")
    @classmethod
    def _check_uri(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not urlparse(value).scheme:
            raise ValueError("must be an absolute URI")
        return value

    @field_validator("odbc_path")
    @classmethod
    def _expand_path(cls, value: str) -> str:
        return str(Path(value).expanduser())

    @model_validator(mode="after")
    def _check_oauth_fields(self) -> "Profile":
        if self.oauth:
            missing = [name for name in OAUTH_FIELDS if not getattr(self, name.replace("-", "_"))]
            if missing:
                raise ValueError(f"OAuth profiles require: {', '.join(missing)}")
        return self


class Configuration(BaseModel):
    """Resolved configuration for one run"""

    model_config = ConfigDict(populate_by_name=True)

    profile_name: str
    default_profile: str
    driver_name: str = Field(alias="driver-name")
    driver_path: str = Field(alias="driver-path")
    profile: Profile


def running_in_docker() -> bool:
    """Detect whether the process runs inside a Docker container"""
    if os.path.exists("/.dockerenv"):
        return True
    try:
        return "docker" in Path("/proc/self/cgroup").read_text()
    except OSError:
        return False


def read_config_file(path: Path) -> Dict[str, Any]:
    """Read the YAML configuration file

    Returns:
        Parsed mapping, empty when the file does not exist
    """
    if not path.exists():
        logger.debug(f"Configuration file not found: {path}")
        return {}

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Invalid configuration in {path}: expected a mapping")
    return data


def load_configuration(
    config_file: Path,
    profile_name: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    loader: Optional[ConfigLoader] = None,
    in_docker: Optional[bool] = None,
    fallback_profile: str = "dev",
) -> Configuration:
    """Resolve and validate the configuration of one profile

    Args:
        config_file: Path to the YAML configuration file
        profile_name: Profile to load; defaults to the file's 'default' key
        overrides: Field values from the command line, keyed by field name
            ('okta-org', 'account', ...). None values are ignored.
        loader: ConfigLoader for GSC_ environment variables
        in_docker: Override Docker detection
        fallback_profile: Profile used when neither argument nor file name one

    Returns:
        Validated Configuration

    Raises:
        ConfigError: If the file is unreadable or fields are invalid
    """
    loader = loader or get_config_loader()
    data = read_config_file(Path(config_file).expanduser())

    default_profile = str(data.get("default") or fallback_profile)
    profile_name = profile_name or default_profile

    section = data.get(profile_name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Profile '{profile_name}' must be a mapping")

    values: Dict[str, Any] = {name: data[name] for name in GLOBAL_FIELDS if name in data}
    values.update(section)

    field_names = list(GLOBAL_FIELDS) + [
        field.alias or name for name, field in Profile.model_fields.items()
    ]
    for name in field_names:
        env_value = loader.get_raw(name)
        if env_value is not None:
            values[name] = env_value

    for name, value in (overrides or {}).items():
        if value is not None:
            values[name] = value

    if in_docker is None:
        in_docker = running_in_docker()
    if in_docker:
        logger.debug("Running in Docker!")
        values.setdefault("odbc-path", DOCKER_ODBC_PATH)

    profile_values = {key: value for key, value in values.items() if key not in GLOBAL_FIELDS}
    config_values: Dict[str, Any] = {
        "profile_name": profile_name,
        "default_profile": default_profile,
        "profile": profile_values,
    }
    config_values.update({name: values[name] for name in GLOBAL_FIELDS if values.get(name) is not None})

    try:
        return Configuration.model_validate(config_values)
    except ValidationError as e:
        raise _config_error(profile_name, e) from e


def _config_error(profile_name: str, error: ValidationError) -> ConfigError:
    fields = []
    lines = []
    for item in error.errors():
        loc = [str(part) for part in item["loc"] if part != "profile"]
        field = ".".join(loc) if loc else profile_name
        fields.append(field)
        if item["type"] == "missing":
            lines.append(f"Parameter {field} is required")
        else:
            lines.append(f"Parameter {field}: {item['msg']}")
    return ConfigError(f"Invalid configuration for profile '{profile_name}':\n" + "\n".join(lines), fields)
