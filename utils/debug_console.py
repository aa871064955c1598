"""Rich console that mirrors its output into the debug log.

With --debug every status line shown to the operator is also written,
as plain text, to the debug log file next to the HTTP diagnostics.
"""

import io
import logging
from typing import Optional
from rich.console import Console as RichConsole

DEBUG_LOGGER_NAME = "gsc.console"


class DebugCapturingConsole(RichConsole):
    """Rich Console whose print() output is also sent to a logger"""

    def __init__(self, debug_logger: Optional[logging.Logger] = None, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.debug_logger = debug_logger
        self._log_prefix = "[CONSOLE] "

    def print(self, *objects, **kwargs):
        super().print(*objects, **kwargs)

        if self.debug_logger and self.debug_logger.isEnabledFor(logging.DEBUG):
            plain_text = self._render_plain(*objects, **kwargs)
            if plain_text:
                self.debug_logger.debug(f"{self._log_prefix}{plain_text}")

    def _render_plain(self, *objects, **kwargs) -> str:
        """Render objects without markup or ANSI codes"""
        buffer = io.StringIO()
        plain = RichConsole(
            file=buffer,
            force_terminal=False,
            no_color=True,
            width=self.width,
            legacy_windows=False,
        )
        plain.print(*objects, **kwargs)
        return buffer.getvalue().rstrip()


def create_debug_console(debug_enabled: bool = False,
                         debug_logger: Optional[logging.Logger] = None) -> RichConsole:
    """
    Create the console for this run.

    Returns:
        DebugCapturingConsole if debug enabled, regular Console otherwise
    """
    if debug_enabled and debug_logger:
        return DebugCapturingConsole(debug_logger=debug_logger)
    return RichConsole()


def setup_debug_logger(log_file: str) -> logging.Logger:
    """
    Set up the logger that receives captured console output.

    Args:
        log_file: Path to debug log file (appended to)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(DEBUG_LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()

    file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(message)s'))
    logger.addHandler(file_handler)

    # The root logger writes to the same file; don't log twice
    logger.propagate = False

    return logger
