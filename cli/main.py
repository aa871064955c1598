"""CLI entry point and argument parsing"""

import argparse
import logging
import signal
import sys
from contextlib import ExitStack
from typing import List, Optional

from rich.console import Console
from rich.markup import escape

import settings
from cli.debug_setup import setup_logging
from cli.prompts import RichPrompter
from cli.status_display import show_auth_failure, show_credentials_summary
from config.profiles import ConfigError, Configuration, load_configuration
from generator import write_dbt_config, write_generic_credentials, write_odbc_config
from okta_auth import AuthError, Authenticator, Credentials, OktaClient
from utils.files import UnreadableConfigError
from utils.storage import PasswordStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_AUTH_FAILED = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130

# (short flag, long flag, help); the long flag doubles as the config field name
PROFILE_FLAGS = [
    ("-a", "--account", "Snowflake account, like: xy12345.us-east-1"),
    ("-d", "--database", "Snowflake database"),
    ("-w", "--warehouse", "Snowflake warehouse"),
    ("-x", "--schema", "Snowflake schema (default: PUBLIC)"),
    ("-o", "--okta-org", "like: https://funtimes.oktapreview.com"),
    ("-n", "--odbc-path", "Directory holding odbc.ini and odbcinst.ini"),
    ("-v", "--driver-path", "Location of ODBC driver"),
    ("-c", "--client-id", "OIDC Client ID of Okta application"),
    ("-s", "--role", "Snowflake role name"),
    ("-i", "--issuer-url", "Issuer URL of Okta authorization server"),
    ("-r", "--redirect-uri", "Redirect URI of Okta application"),
    ("-u", "--username", "Username for Okta"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gimme-snowflake-creds",
        description="A tool that utilizes Okta IdP via OAuth to acquire temporary Snowflake credentials",
    )
    parser.add_argument("-p", "--profile", default=None, help="Profile selection (default: from config file, else dev)")
    for short, long, help_text in PROFILE_FLAGS:
        parser.add_argument(short, long, default=None, help=help_text)
    parser.add_argument("--config", default=None, help=f"Configuration file (default: {settings.CONFIG_FILE})")
    parser.add_argument("--forget", action="store_true", help="Remove the stored Okta password before authenticating")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def profile_overrides(args: argparse.Namespace) -> dict:
    """Command-line values keyed by configuration field name"""
    overrides = {}
    for _, long, _ in PROFILE_FLAGS:
        name = long[2:]
        overrides[name] = getattr(args, name.replace("-", "_"))
    return overrides


def authenticate(config: Configuration, store: PasswordStore, console: Console, transport=None) -> Credentials:
    """Run the Okta flow for the profile, or return empty credentials without OAuth"""
    profile = config.profile

    with ExitStack() as stack:
        client = None
        if profile.oauth:
            client = stack.enter_context(OktaClient(
                okta_org=profile.okta_org,
                issuer_url=profile.issuer_url,
                client_id=profile.client_id,
                redirect_uri=profile.redirect_uri,
                scope=settings.OAUTH_SCOPE,
                timeout=settings.HTTP_TIMEOUT,
                transport=transport,
            ))

        authenticator = Authenticator(
            client,
            RichPrompter(console),
            secret_store=store,
            console=console,
            poll_interval=settings.MFA_POLL_INTERVAL,
            max_wait=settings.MFA_MAX_WAIT or None,
            verify_state=settings.VERIFY_STATE,
        )
        return authenticator.run(profile.username, enabled=profile.oauth)


def write_outputs(config: Configuration, credentials: Credentials, console: Console) -> bool:
    """Run every configuration writer; a failing writer does not stop the others

    Returns:
        True if all writers succeeded
    """
    writers = [("ODBC", write_odbc_config), ("DBT", write_dbt_config)]
    if config.profile.generic and config.profile.oauth:
        writers.append(("Generic", write_generic_credentials))

    ok = True
    for label, writer in writers:
        try:
            writer(config, credentials, console)
        except OSError as e:
            console.print(f"[red]{label}: Couldn't write config![/red]")
            if isinstance(e, UnreadableConfigError):
                console.print(escape(str(e)), style="yellow")
            logger.debug(f"Couldn't write {label} config: {e!r}")
            ok = False
    return ok


def run(args: argparse.Namespace, console: Console) -> int:
    config = load_configuration(
        args.config or settings.CONFIG_FILE,
        profile_name=args.profile,
        overrides=profile_overrides(args),
        fallback_profile=settings.DEFAULT_PROFILE,
    )
    logger.debug(f"Using profile {config.profile_name}")

    store = PasswordStore()
    if args.forget and store.delete(config.profile.username):
        console.print("[green]Password removed from keyring[/green]")

    credentials = authenticate(config, store, console)

    if not write_outputs(config, credentials, console):
        return EXIT_AUTH_FAILED

    show_credentials_summary(config, credentials, console)
    return EXIT_OK


def _raise_interrupt(signum, frame):
    raise KeyboardInterrupt


def main(argv: Optional[List[str]] = None):
    """Entry point for the CLI"""
    args = build_parser().parse_args(argv)
    console = setup_logging(args.debug)

    # SIGTERM unwinds like Ctrl+C so writers never stop half way
    signal.signal(signal.SIGTERM, _raise_interrupt)

    try:
        code = run(args, console)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        code = EXIT_CONFIG_ERROR
    except AuthError as e:
        show_auth_failure(e, console)
        code = EXIT_AUTH_FAILED
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        code = EXIT_INTERRUPTED

    sys.exit(code)


if __name__ == "__main__":
    main()
