"""CLI package for gimme-snowflake-creds

Parses arguments, resolves the profile, runs the Okta flow and writes the
database client configuration. The entry point is ``cli.main.main``.
"""

from cli.prompts import RichPrompter

__all__ = [
    "RichPrompter",
]
