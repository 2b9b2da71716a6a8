"""
Context Manager Utilities
==========================

Single responsibility: Scoped file handles that translate OS failures.
"""

from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Union

from geometry_io.core.exceptions import FileAccessError
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)


@contextmanager
def open_text(path: Union[str, Path], mode: str = "r") -> Iterator[IO[str]]:
    """
    Open a text file for one codec call.

    The handle is closed on every exit path, including parse failures
    raised inside the with-block. Only errors raised by open() itself are
    translated to FileAccessError.

    Args:
        path: File to open
        mode: 'r' to read, 'w' to create/truncate

    Yields:
        Open text handle

    Raises:
        FileAccessError: If the file cannot be opened or created

    Example:
        >>> with open_text("mesh.obj") as f:
        ...     first = f.readline()
    """
    try:
        f = open(path, mode, encoding="utf-8", errors="replace", newline=None)
    except OSError as e:
        action = "create" if "w" in mode else "open"
        raise FileAccessError(f"Cannot {action} {path}: {e.strerror or e}") from e

    logger.debug(f"Opened {path} (mode={mode})")
    with f:
        yield f
