import logging
import tempfile
import unittest
from io import StringIO
from pathlib import Path

from rich.console import Console

from cli.debug_setup import setup_logging
from utils.debug_console import DebugCapturingConsole, create_debug_console


class ListHandler(logging.Handler):
    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


class TestDebugCapturingConsole(unittest.TestCase):
    def setUp(self):
        self.logger = logging.getLogger("gsc.console.test")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        self.handler = ListHandler()
        self.logger.addHandler(self.handler)
        self.addCleanup(self.logger.removeHandler, self.handler)

    def test_print_is_mirrored_without_markup(self):
        console = DebugCapturingConsole(debug_logger=self.logger, file=StringIO(), width=120)

        console.print("[green]MFA verified![/green]")

        self.assertEqual(self.handler.messages, ["[CONSOLE] MFA verified!"])

    def test_regular_console_without_debug(self):
        console = create_debug_console(debug_enabled=False)
        self.assertNotIsInstance(console, DebugCapturingConsole)
        self.assertIsInstance(console, Console)


class TestSetupLogging(unittest.TestCase):
    def setUp(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level

        def restore():
            for handler in root.handlers[:]:
                root.removeHandler(handler)
                if handler not in handlers:
                    handler.close()
            for handler in handlers:
                root.addHandler(handler)
            root.setLevel(level)

        self.addCleanup(restore)
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def test_debug_writes_log_file(self):
        log_file = Path(self.tmp.name) / "gsc_debug.log"

        console = setup_logging(True, str(log_file))
        self.addCleanup(self._close_console_logger)
        logging.getLogger("okta_auth.test").debug("request details")

        self.assertIsInstance(console, DebugCapturingConsole)
        self.assertEqual(logging.getLogger().level, logging.DEBUG)
        self.assertIn("request details", log_file.read_text())

    def test_default_level(self):
        console = setup_logging(False)

        self.assertNotIsInstance(console, DebugCapturingConsole)
        self.assertEqual(logging.getLogger().level, logging.WARNING)

    @staticmethod
    def _close_console_logger():
        logger = logging.getLogger("gsc.console")
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
