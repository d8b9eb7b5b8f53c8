"""YAML front matter handling for markdown documents.

Splits a source document into its front matter block and body, parses the
block into typed ``Metadata`` and renders new front matter for output
dialects.
"""

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from convmd.exceptions import MalformedFrontMatterError
from convmd.utils.logging import get_logger

log = get_logger(__name__)


# Opening delimiter on the first line, closed by the first delimiter line after it.
FRONTMATTER_PATTERN = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)^---[ \t]*\r?(?:\n|\Z)",
    re.DOTALL | re.MULTILINE,
)

# Textual date encodings accepted besides ISO 8601
_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y.%m.%d",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%b %d, %Y",
    "%B %d, %Y",
    "%d %b %Y",
    "%d %B %Y",
)


def parse_date(value: str) -> dt.date:
    """Parse a textual date, dropping any time of day.

    Raises:
        ValueError: If no known encoding matches
    """
    text = value.strip()
    try:
        return dt.datetime.fromisoformat(text).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognized date: {value!r}")


class Metadata(BaseModel):
    """Front matter fields understood by the default dialect."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str | None = None
    date: dt.date | None = None
    tags: list[str] = []

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, value: Any) -> Any:
        if isinstance(value, (int, float, bool, dt.date)):
            return str(value)
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> Any:
        if isinstance(value, dt.datetime):
            return value.date()
        if isinstance(value, str):
            return parse_date(value)
        return value

    @field_validator("tags", mode="before")
    @classmethod
    def _one_or_many(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple)):
            return [str(tag) for tag in value]
        return [str(value)]


def split_frontmatter(text: str) -> tuple[str, int] | None:
    """Locate the front matter block.

    Args:
        text: Full document text

    Returns:
        Tuple of (block text, offset where the body starts), or None if the
        document does not open with a delimited block
    """
    match = FRONTMATTER_PATTERN.match(text)
    if not match:
        return None
    return match.group(1), match.end()


def parse_metadata(block: str) -> Metadata:
    """Parse a front matter block into ``Metadata``.

    Raises:
        MalformedFrontMatterError: If the block is not a YAML mapping with
            valid field values
    """
    try:
        data = yaml.safe_load(block)
    except yaml.YAMLError as e:
        raise MalformedFrontMatterError(f"Invalid YAML in front matter: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise MalformedFrontMatterError(
            f"Front matter must be a mapping, got {type(data).__name__}"
        )

    try:
        return Metadata.model_validate(data)
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise MalformedFrontMatterError(f"Invalid front matter field(s): {fields}") from e


@dataclass(frozen=True)
class SourceDocument:
    """A loaded source document split into front matter and body."""

    raw_text: str
    name_stem: str
    front_matter: Metadata | None = None
    body_offset: int = 0

    @property
    def body(self) -> str:
        """Document text after the front matter block."""
        return self.raw_text[self.body_offset :]

    @classmethod
    def from_text(cls, text: str, name_stem: str) -> "SourceDocument":
        """Split and parse already-loaded document text."""
        found = split_frontmatter(text)
        if found is None:
            log.debug("No front matter block", stem=name_stem)
            return cls(raw_text=text, name_stem=name_stem)

        block, body_offset = found
        return cls(
            raw_text=text,
            name_stem=name_stem,
            front_matter=parse_metadata(block),
            body_offset=body_offset,
        )

    @classmethod
    def from_path(cls, path: Path) -> "SourceDocument":
        """Load a UTF-8 document from disk and split it."""
        return cls.from_text(path.read_text(encoding="utf-8"), path.stem)


def render_frontmatter(data: dict[str, Any]) -> str:
    """Render a mapping as a delimited YAML front matter block.

    Keys keep their insertion order.
    """
    yaml_str = yaml.dump(
        data,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
    return f"---\n{yaml_str}---\n"
