"""Logging and console setup for the CLI"""

import logging
import os
from typing import Optional

from rich.console import Console

import settings
from utils.debug_console import create_debug_console, setup_debug_logger


def setup_logging(debug: bool, log_file: Optional[str] = None) -> Console:
    """
    Configure logging and return the console for this run

    Without debug, the root logger uses the level from GSC_LOG_LEVEL and
    writes to stderr. With debug, everything at DEBUG goes to the debug
    log file (appended) and stderr, and console output is captured too.

    Args:
        debug: Whether debug mode is enabled
        log_file: Debug log path (default: settings.DEBUG_LOG_FILE)

    Returns:
        Console instance (either regular or debug-capturing)
    """
    root_logger = logging.getLogger()

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    if not debug:
        level = logging.getLevelName(str(settings.LOG_LEVEL).upper())
        root_logger.setLevel(level if isinstance(level, int) else logging.WARNING)
        return create_debug_console(debug_enabled=False)

    log_file = os.path.abspath(log_file or settings.DEBUG_LOG_FILE)
    root_logger.setLevel(logging.DEBUG)
    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    debug_logger = setup_debug_logger(log_file)
    console = create_debug_console(debug_enabled=True, debug_logger=debug_logger)
    console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {log_file}[/yellow]")
    debug_logger.debug("[CLI] ===== SESSION STARTED =====")
    return console
