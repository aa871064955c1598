"""ODBC configuration writer (odbc.ini / odbcinst.ini)

Only the section being written is replaced. Every other line of the
existing file, comments included, is kept as it was.
"""

import configparser
import logging
from pathlib import Path
from typing import Dict, List, Optional

from rich.console import Console

from config.profiles import Configuration
from okta_auth.models import Credentials
from utils.files import UnreadableConfigError, atomic_write_text

logger = logging.getLogger(__name__)

COMMENT_PREFIXES = ("#", ";")


def _read_ini(path: Path, label: str, console: Console) -> str:
    """Read an existing INI file, checking that it parses

    Raises:
        UnreadableConfigError: If the file exists but is not valid INI
    """
    if not path.exists():
        console.print(f"[green]ODBC: No existing `{label}`, creating file...[/green]")
        return ""

    parser = configparser.ConfigParser(interpolation=None)
    try:
        text = path.read_text(encoding="utf-8")
        parser.read_string(text, source=str(path))
    except (UnicodeDecodeError, configparser.Error) as e:
        raise UnreadableConfigError(path, e) from e
    return text


def _section_name(line: str) -> Optional[str]:
    stripped = line.strip()
    if stripped.startswith("[") and stripped.endswith("]") and len(stripped) > 2:
        return stripped[1:-1]
    return None


def replace_section(text: str, name: str, values: Dict[str, str]) -> str:
    """Replace (or append) one INI section, leaving the rest of the text as is

    Comment and blank lines just before the next section header belong to
    that next section and are kept.

    Args:
        text: Current file contents
        name: Section name, without brackets
        values: Keys and values of the new section

    Returns:
        New file contents
    """
    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"

    start = end = None
    for index, line in enumerate(lines):
        header = _section_name(line)
        if header is None:
            continue
        if start is None and header == name:
            start = index
        elif start is not None:
            end = index
            break

    rendered: List[str] = [f"[{name}]\n"] + [f"{key} = {value}\n" for key, value in values.items()]

    if start is None:
        if lines and lines[-1].strip():
            lines.append("\n")
        return "".join(lines + rendered)

    if end is None:
        end = len(lines)
    keep_from = end
    while keep_from > start + 1:
        previous = lines[keep_from - 1].strip()
        if previous and not previous.startswith(COMMENT_PREFIXES):
            break
        keep_from -= 1

    tail = lines[keep_from:]
    if tail and tail[0].strip():
        rendered.append("\n")
    return "".join(lines[:start] + rendered + tail)


def write_odbc_config(config: Configuration, credentials: Credentials, console: Console) -> Path:
    """Write the profile DSN and driver alias

    Both files are read and checked before either is written, so an
    unparseable file leaves both untouched.

    Args:
        config: Resolved configuration
        credentials: Credentials from the Okta flow (empty without OAuth)
        console: Rich console for status output

    Returns:
        Path of the written odbc.ini

    Raises:
        UnreadableConfigError: If an existing file cannot be parsed
    """
    profile = config.profile
    odbc_dir = Path(profile.odbc_path)
    odbc_file = odbc_dir / "odbc.ini"
    odbcinst_file = odbc_dir / "odbcinst.ini"

    odbc_text = _read_ini(odbc_file, "odbc.ini", console)
    odbcinst_text = _read_ini(odbcinst_file, "odbcinst.ini", console)

    section = {
        "Driver": config.driver_name,
        "server": f"{profile.account}.snowflakecomputing.com",
        "uid": profile.username,
        "role": profile.role,
        "database": profile.database,
        "schema": profile.schema_name,
        "warehouse": profile.warehouse,
    }
    if profile.oauth:
        section["authenticator"] = "oauth"
        section["token"] = credentials.access_token
    else:
        section["authenticator"] = "externalbrowser"

    # Replace the whole section so a stale token never survives a mode switch
    atomic_write_text(odbc_file, replace_section(odbc_text, config.profile_name, section), mode=0o600)
    atomic_write_text(
        odbcinst_file,
        replace_section(odbcinst_text, config.driver_name, {"Driver": config.driver_path}),
    )

    logger.debug(f"Wrote ODBC section [{config.profile_name}] and driver [{config.driver_name}]")
    console.print(f"[green]ODBC: Profile {config.profile_name} written to: {odbc_file}[/green]")
    return odbc_file
