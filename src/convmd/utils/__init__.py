"""Utility module for convmd."""

from convmd.utils.fs import (
    atomic_write,
    discover_files,
    ensure_directory,
    is_hidden,
    read_text,
    shorten_path,
    write_text,
)

__all__ = [
    "atomic_write",
    "discover_files",
    "ensure_directory",
    "is_hidden",
    "read_text",
    "shorten_path",
    "write_text",
]
