"""Mapping from the default draft dialect to Jekyll posts."""

from pathlib import Path
from typing import Any

from convmd.config.constants import (
    DEFAULT_ASSET_DIR,
    DEFAULT_JEKYLL_LAYOUT,
    DEFAULT_JEKYLL_MATHJAX,
    OUTPUT_SUFFIX,
)
from convmd.exceptions import MissingFrontMatterError, MissingRequiredFieldError
from convmd.markdown.frontmatter import Metadata, SourceDocument
from convmd.markdown.rewriter import MediaRewriter
from convmd.mapper.base import Mapper, OutputDocument
from convmd.mapper.dialects import Dialect
from convmd.mapper.taxonomy import Category, TagCategoryTable, TagClassifier, build_tag_table
from convmd.utils.logging import get_logger

log = get_logger(__name__)


def _require_metadata(document: SourceDocument) -> Metadata:
    """Return front matter carrying the fields every post needs.

    Checked in order: front matter, then ``date``, then ``title``.
    """
    metadata = document.front_matter
    if metadata is None:
        raise MissingFrontMatterError()
    if metadata.date is None:
        raise MissingRequiredFieldError("date")
    if metadata.title is None:
        raise MissingRequiredFieldError("title")
    return metadata


class JekyllMapper(Mapper):
    """Convert default-dialect drafts into Jekyll posts.

    Output posts are named ``<YYYY-MM-DD>-<stem>.md`` and carry a fixed
    front matter layout: title, date, layout, mathjax and a single category.
    """

    source = Dialect.DEFAULT
    target = Dialect.JEKYLL

    def __init__(
        self,
        asset_dir: str = DEFAULT_ASSET_DIR,
        layout: str = DEFAULT_JEKYLL_LAYOUT,
        mathjax: bool = DEFAULT_JEKYLL_MATHJAX,
        tag_table: TagCategoryTable | None = None,
    ) -> None:
        self.layout = layout
        self.mathjax = mathjax
        self.rewriter = MediaRewriter(asset_dir)
        self.classifier = TagClassifier(build_tag_table() if tag_table is None else tag_table)

    def rewrite(self, document: SourceDocument) -> str:
        return self.rewriter.rewrite(document.body)

    def classify(self, document: SourceDocument) -> list[Category]:
        """Classify the tags of a post.

        Required fields are checked first, so a draft without a date is
        reported as such even when its tags also conflict.
        """
        return self.classifier.classify(_require_metadata(document).tags)

    def synthesize(
        self,
        document: SourceDocument,
        body: str,
        categories: list[Category],
        output_dir: Path,
    ) -> OutputDocument:
        """Build the Jekyll post.

        Raises:
            MissingFrontMatterError: If the source had no front matter
            MissingRequiredFieldError: If ``date`` or ``title`` is absent
        """
        metadata = _require_metadata(document)
        date_prefix = metadata.date.strftime("%Y-%m-%d")

        front_matter: dict[str, Any] = {
            "title": metadata.title,
            "date": date_prefix,
            "layout": self.layout,
            "mathjax": self.mathjax,
            "category": [category.slug for category in categories],
        }

        path = output_dir / f"{date_prefix}-{document.name_stem}{OUTPUT_SUFFIX}"
        log.debug("Synthesized post", output=str(path), category=front_matter["category"])
        return OutputDocument(path=path, metadata=front_matter, body=body)
