"""dbt profiles.yml writer"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from rich.console import Console

from config.profiles import Configuration
from okta_auth.models import Credentials
from settings import DBT_PROFILES_FILE
from utils.files import UnreadableConfigError, atomic_write_text

logger = logging.getLogger(__name__)


def build_dbt_output(config: Configuration, credentials: Credentials) -> Dict[str, Any]:
    """Build the dbt output entry for the active profile"""
    profile = config.profile
    output: Dict[str, Any] = {
        "type": "snowflake",
        "account": profile.account,
        "user": profile.username,
        "authenticator": "oauth" if profile.oauth else "externalbrowser",
        "role": profile.role,
        "database": profile.database,
        "warehouse": profile.warehouse,
        "schema": profile.schema_name,
        "threads": profile.threads,
        "client_session_keep_alive": profile.client_session_keep_alive,
    }
    if profile.oauth:
        output["token"] = credentials.access_token
    return output


def write_dbt_config(
    config: Configuration,
    credentials: Credentials,
    console: Console,
    profiles_file: Optional[Path] = None,
) -> Path:
    """Merge the active profile into dbt's profiles.yml

    The dbt profile (``dbt-profile``, default "default") gets
    ``target: <default profile>`` and ``outputs.<profile>``; other
    profiles and outputs in the file are kept.

    Returns:
        Path of the written profiles.yml

    Raises:
        UnreadableConfigError: If the existing file is not a YAML mapping
    """
    path = Path(profiles_file or DBT_PROFILES_FILE).expanduser()
    dbt_profile = config.profile.dbt_profile or "default"

    data: Dict[str, Any] = {}
    loaded = None
    if path.exists():
        try:
            loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise UnreadableConfigError(path, e) from e
    if loaded is None:
        console.print("[green]DBT: No existing configuration found, creating file...[/green]")
    elif isinstance(loaded, dict):
        data = loaded
    else:
        raise UnreadableConfigError(path, f"expected a mapping, found {type(loaded).__name__}")

    entry = data.get(dbt_profile)
    if not isinstance(entry, dict):
        entry = {}
    outputs = entry.get("outputs")
    if not isinstance(outputs, dict):
        outputs = {}

    outputs[config.profile_name] = build_dbt_output(config, credentials)
    entry["target"] = config.default_profile
    entry["outputs"] = outputs
    data[dbt_profile] = entry

    atomic_write_text(path, yaml.safe_dump(data, default_flow_style=False, sort_keys=False), mode=0o600)

    console.print(f"[green]DBT: Profile {config.profile_name} written to: {path}[/green]")
    return path
