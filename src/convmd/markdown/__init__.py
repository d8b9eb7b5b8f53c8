"""Markdown processing module for convmd."""

from convmd.markdown.frontmatter import (
    FRONTMATTER_PATTERN,
    Metadata,
    SourceDocument,
    parse_metadata,
    render_frontmatter,
    split_frontmatter,
)
from convmd.markdown.renderer import BlogMarkdownRenderer, create_markdown_parser
from convmd.markdown.rewriter import (
    MediaRewriter,
    remap_url,
    rewrite_html_fragment,
    rewrite_media_refs,
    rewrite_token,
)

__all__ = [
    # Front matter
    "FRONTMATTER_PATTERN",
    "Metadata",
    "SourceDocument",
    "parse_metadata",
    "render_frontmatter",
    "split_frontmatter",
    # Rendering
    "BlogMarkdownRenderer",
    "create_markdown_parser",
    # Media rewriting
    "MediaRewriter",
    "remap_url",
    "rewrite_html_fragment",
    "rewrite_media_refs",
    "rewrite_token",
]
