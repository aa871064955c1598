"""File helpers for configuration writers"""

import os
import platform
import tempfile
from pathlib import Path
from typing import Optional


class UnreadableConfigError(OSError):
    """An existing configuration file could not be parsed and was left untouched"""

    def __init__(self, path: Path, reason: object):
        self.path = Path(path)
        self.reason = str(reason)
        super().__init__(f"{self.path} could not be parsed, leaving it untouched: {self.reason}")


def ensure_directory(path: Path, mode: int = 0o700) -> None:
    """Create a directory (and parents) if missing"""
    if not path.exists():
        path.mkdir(parents=True, exist_ok=True)
        # Set directory permissions on Unix-like systems
        if platform.system() != "Windows":
            os.chmod(path, mode)


def atomic_write_text(path: Path, text: str, mode: Optional[int] = None) -> None:
    """Write a file by replacing it with a fully written temporary file

    An interrupted write leaves the previous file untouched.

    Args:
        path: Destination file
        text: File contents
        mode: Optional permission bits for the new file (e.g. 0o600)
    """
    path = Path(path)
    ensure_directory(path.parent)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        if mode is not None and platform.system() != "Windows":
            os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
