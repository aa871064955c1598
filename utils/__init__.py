"""Shared utilities package for gimme-snowflake-creds"""

from .storage import PasswordStore
from .files import UnreadableConfigError, atomic_write_text, ensure_directory
from .debug_console import (
    DebugCapturingConsole,
    create_debug_console,
    setup_debug_logger,
)

__all__ = [
    "PasswordStore",
    "UnreadableConfigError",
    "atomic_write_text",
    "ensure_directory",
    "DebugCapturingConsole",
    "create_debug_console",
    "setup_debug_logger",
]
