"""CLI callback functions."""

from pathlib import Path

import typer

from convmd.mapper.dialects import Dialect


def validate_output_dir(value: Path) -> Path:
    """Reject an output path that exists as a file."""
    if value.exists() and not value.is_dir():
        raise typer.BadParameter(f"Output path exists but is not a directory: {value}")

    return value


def validate_dialect(value: str) -> Dialect:
    """Parse a dialect name (``default``/``d``, ``jekyll``/``j``)."""
    try:
        return Dialect.parse(value)
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e
