"""File system utilities for convmd.

Provides directory discovery, directory creation and whole-file text
reads/writes used around the conversion core.
"""

import os
import tempfile
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any

from convmd.config.constants import MARKDOWN_EXTENSIONS
from convmd.utils.logging import get_logger

log = get_logger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path

    Returns:
        The directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_hidden(path: Path) -> bool:
    """Check if a path is hidden (dot-prefixed)."""
    return path.name.startswith(".")


def discover_files(
    directory: Path,
    recursive: bool = False,
    extensions: Iterable[str] | None = None,
) -> list[Path]:
    """Discover markdown documents in a directory.

    Args:
        directory: Directory to search
        recursive: Search subdirectories
        extensions: File extensions to include (default: MARKDOWN_EXTENSIONS),
                    matched case-insensitively

    Returns:
        Sorted list of file paths
    """
    wanted = {ext.lower() for ext in (extensions or MARKDOWN_EXTENSIONS)}
    pattern = "**/*" if recursive else "*"

    files = [
        file_path
        for file_path in directory.glob(pattern)
        if file_path.is_file()
        and file_path.suffix.lower() in wanted
        and not is_hidden(file_path)
    ]

    # Sort for consistent ordering
    files.sort()
    log.debug("Discovered files", directory=str(directory), count=len(files))
    return files


def read_text(file_path: Path) -> str:
    """Read a UTF-8 document."""
    return file_path.read_text(encoding="utf-8")


@contextmanager
def atomic_write(
    file_path: Path,
    mode: str = "w",
    encoding: str | None = "utf-8",
) -> Iterator[IO[Any]]:
    """Context manager for atomic file writes.

    Writes to a temp file first, then atomically moves to target,
    replacing whatever was there.

    Args:
        file_path: Target file path
        mode: File mode ('w' or 'wb')
        encoding: File encoding (ignored for binary mode)

    Yields:
        File handle
    """
    temp_fd, temp_path = tempfile.mkstemp(
        dir=file_path.parent,
        prefix=f".{file_path.name}.",
    )
    temp_path = Path(temp_path)

    try:
        os.close(temp_fd)

        if "b" in mode:
            with open(temp_path, mode) as f:
                yield f
        else:
            with open(temp_path, mode, encoding=encoding, newline="") as f:
                yield f

        temp_path.replace(file_path)

    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


def write_text(file_path: Path, content: str) -> Path:
    """Write a document, overwriting any existing file.

    The parent directory must already exist.
    """
    with atomic_write(file_path) as f:
        f.write(content)
    return file_path


def shorten_path(path: Path) -> Path:
    """Display form of a path with the home directory collapsed to ``~``."""
    try:
        return Path("~") / path.resolve().relative_to(Path.home())
    except (ValueError, RuntimeError):
        return path
