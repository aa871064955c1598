"""Generic credentials file writer (~/.gsc/<profile>/credentials)"""

import logging
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values
from rich.console import Console

from config.profiles import Configuration
from okta_auth.models import Credentials
from settings import GENERIC_CREDENTIALS_DIR
from utils.files import atomic_write_text

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def write_generic_credentials(
    config: Configuration,
    credentials: Credentials,
    console: Console,
    base_dir: Optional[Path] = None,
) -> Path:
    """Write the token as KEY='value' lines for tools that read env files

    Existing keys in the file are kept.

    Returns:
        Path of the written credentials file
    """
    path = Path(base_dir or GENERIC_CREDENTIALS_DIR).expanduser() / config.profile_name / "credentials"

    values: Dict[str, Optional[str]] = {}
    if path.exists():
        values = dict(dotenv_values(path))
    else:
        console.print("[green]Generic: No existing configuration found, creating file...[/green]")
        logger.debug(f"Generic credentials file {path} does not exist")

    values["SNOWFLAKE_USER"] = config.profile.username
    values["SNOWFLAKE_OAUTH_ACCESS_TOKEN"] = credentials.access_token
    values["SNOWFLAKE_AUTH_URI"] = f"authenticator=oauth&token={credentials.access_token}"

    lines = [key if value is None else f"{key}={_quote(value)}" for key, value in values.items()]
    atomic_write_text(path, "\n".join(lines) + "\n", mode=0o600)

    console.print(f"[green]Generic: Profile {config.profile_name} written to: {path}[/green]")
    return path
