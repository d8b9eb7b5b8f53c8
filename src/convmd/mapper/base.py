"""Base mapper interface and output document."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from convmd.markdown.frontmatter import SourceDocument, render_frontmatter
from convmd.mapper.dialects import Dialect
from convmd.mapper.taxonomy import Category


@dataclass(frozen=True)
class OutputDocument:
    """A converted document ready to be written."""

    path: Path
    metadata: dict[str, Any]
    body: str

    def render(self) -> str:
        """Full file text: front matter block followed by the body."""
        return render_frontmatter(self.metadata) + self.body


class Mapper(ABC):
    """Conversion strategy from one dialect to another.

    The document converter drives a mapper through its stages in order:
    ``read`` -> ``rewrite`` -> ``classify`` -> ``synthesize``.
    """

    source: Dialect
    target: Dialect

    @property
    def name(self) -> str:
        return f"{self.source.value} -> {self.target.value}"

    def read(self, text: str, name_stem: str) -> SourceDocument:
        """Split raw text into front matter and body.

        Args:
            text: Full document text
            name_stem: File name without extension

        Returns:
            The split source document
        """
        return SourceDocument.from_text(text, name_stem)

    @abstractmethod
    def rewrite(self, document: SourceDocument) -> str:
        """Rewrite the document body for the target dialect."""
        pass

    @abstractmethod
    def classify(self, document: SourceDocument) -> list[Category]:
        """Derive the document's categories from its metadata."""
        pass

    @abstractmethod
    def synthesize(
        self,
        document: SourceDocument,
        body: str,
        categories: list[Category],
        output_dir: Path,
    ) -> OutputDocument:
        """Build the output document and its path under ``output_dir``."""
        pass
