"""Status display functionality for CLI"""

import logging

from rich.table import Table

from config.profiles import Configuration
from okta_auth.errors import AuthError, MFARejected, MFATimeout, PollTimeout
from okta_auth.models import Credentials

logger = logging.getLogger(__name__)


def format_expiry(seconds: int) -> str:
    """Human readable token lifetime, like '1h 0m' or '5m'"""
    hours = seconds // 3600
    minutes = (seconds % 3600) // 60
    if hours > 0:
        return f"{hours}h {minutes}m"
    return f"{minutes}m"


def show_auth_failure(error: AuthError, console):
    """
    Print the one-line failure message and log the details

    Args:
        error: Authentication error raised by the flow
        console: Rich console for output
    """
    style = "yellow" if isinstance(error, (MFARejected, MFATimeout, PollTimeout)) else "red"
    console.print(f"[{style}]{error.message}[/{style}]")
    if error.details:
        logger.debug(f"{type(error).__name__} details: {error.details}")


def show_credentials_summary(config: Configuration, credentials: Credentials, console):
    """
    Display what was obtained for the profile

    Args:
        config: Resolved configuration
        credentials: Credentials from the Okta flow
        console: Rich console for output
    """
    table = Table(title=f"Profile {config.profile_name}")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Account", config.profile.account)
    table.add_row("User", config.profile.username)
    table.add_row("Role", config.profile.role)
    if config.profile.oauth:
        table.add_row("Authenticator", "oauth")
        table.add_row("Token Expires In", format_expiry(credentials.expires_in))
    else:
        table.add_row("Authenticator", "externalbrowser")

    console.print(table)
