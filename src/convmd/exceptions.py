"""Custom exceptions for convmd."""

from pathlib import Path


class ConvmdError(Exception):
    """Base exception class for convmd."""

    pass


class DocumentError(ConvmdError):
    """Error confined to a single document; the batch carries on."""

    pass


class MissingFrontMatterError(DocumentError):
    """No delimited front matter block at the start of the document."""

    def __init__(self) -> None:
        super().__init__("No front matter block found")


class MalformedFrontMatterError(DocumentError):
    """Front matter block present but not a valid metadata mapping."""

    pass


class MissingRequiredFieldError(DocumentError):
    """A field the output dialect needs is absent from the front matter."""

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"No {field} tag in front matter")


class AmbiguousCategoryError(DocumentError):
    """Tags resolve to more than one category."""

    def __init__(self, matches: list[tuple[str, str]]) -> None:
        self.matches = matches
        found = ", ".join(f"{tag!r} -> {category}" for tag, category in matches)
        super().__init__(f"Multiple categories found: {found}")


class UnrenderableMarkupError(DocumentError):
    """An embedded raw HTML fragment could not be parsed for rewriting."""

    def __init__(self, fragment: str, cause: Exception | None = None) -> None:
        self.fragment = fragment
        self.cause = cause
        preview = fragment if len(fragment) <= 60 else fragment[:57] + "..."
        super().__init__(f"Cannot parse embedded HTML {preview!r}: {cause}")


class DocumentIOError(DocumentError):
    """Reading or writing a document failed."""

    def __init__(self, file_path: Path, cause: Exception) -> None:
        self.file_path = file_path
        self.cause = cause
        super().__init__(f"I/O failure on {file_path}: {cause}")


class ConversionError(ConvmdError):
    """Error during document conversion."""

    def __init__(
        self,
        file_path: Path,
        message: str,
        cause: Exception | None = None,
        stage: str | None = None,
    ) -> None:
        self.file_path = file_path
        self.cause = cause
        self.stage = stage
        super().__init__(f"Conversion failed for {file_path}: {message}")


class UnsupportedDialectPairError(ConvmdError):
    """No mapping is registered for the requested dialect pair."""

    def __init__(self, source: str, target: str) -> None:
        self.source = source
        self.target = target
        super().__init__(f"Unsupported dialect mapping: {source} -> {target}")


class ConfigurationError(ConvmdError):
    """Configuration error."""

    pass
