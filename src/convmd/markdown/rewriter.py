"""Media reference rewriting for markdown bodies.

Every image, whether written as markdown (``![alt](url "title")``) or as
raw HTML (``<img src="...">``), is pointed at a single asset directory while
keeping its file name. The body is parsed into mistune tokens, each token is
mapped through ``rewrite_token`` and the result is rendered back to markdown.
"""

import posixpath
import re
from collections.abc import Iterator
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from convmd.config.constants import DEFAULT_ASSET_DIR
from convmd.exceptions import UnrenderableMarkupError
from convmd.markdown.renderer import BlogMarkdownRenderer, Token, create_markdown_parser
from convmd.utils.logging import get_logger

log = get_logger(__name__)

_HTML_TOKENS = {"inline_html", "block_html"}

# Opening <img ...> tag; quoted attribute values may contain ">"
_IMG_TAG = re.compile(r"""<img\b(?:[^>"']|"[^"]*"|'[^']*')*>?""", re.IGNORECASE)
_SRC_ATTR = re.compile(
    r"""\ssrc\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\s"'=<>`]+))""",
    re.IGNORECASE,
)


def remap_url(url: str, asset_dir: str) -> str:
    """Move an image URL into ``asset_dir``, keeping its file name.

    Query string and fragment are kept. ``data:`` URIs and URLs without a
    file name are returned unchanged.

    Examples:
        >>> remap_url("../images/foo.png", "/assets/img")
        '/assets/img/foo.png'
        >>> remap_url("foo.png?v=2", "/assets/img")
        '/assets/img/foo.png?v=2'
    """
    if url.lower().startswith("data:"):
        return url

    parts = urlsplit(url)
    name = posixpath.basename(parts.path)
    if not name:
        return url

    return urlunsplit(("", "", posixpath.join(asset_dir, name), parts.query, parts.fragment))


def _src_value_span(fragment: str, tag_start: int) -> tuple[int, int] | None:
    """Locate the raw ``src`` value of the ``<img>`` tag opening at ``tag_start``."""
    tag = _IMG_TAG.match(fragment, tag_start)
    if tag is None:
        return None
    attr = _SRC_ATTR.search(fragment, tag_start, tag.end())
    if attr is None:
        return None
    group = next(name for name in ("dq", "sq", "bare") if attr.group(name) is not None)
    return attr.span(group)


def rewrite_html_fragment(fragment: str, asset_dir: str) -> str:
    """Rewrite ``src`` of every ``<img>`` in a raw HTML fragment.

    BeautifulSoup only locates the images; the new value is spliced into the
    original text. Everything else, including elements the fragment leaves
    open or closes without opening, is kept byte for byte.

    Raises:
        UnrenderableMarkupError: If the fragment cannot be parsed
    """
    if "<img" not in fragment.lower():
        return fragment

    try:
        soup = BeautifulSoup(fragment, "html.parser")
    except ParserRejectedMarkup as e:
        raise UnrenderableMarkupError(fragment, e) from e

    line_starts = [0] + [m.end() for m in re.finditer("\n", fragment)]
    edits: list[tuple[int, int, str]] = []

    for img in soup.find_all("img", src=True):
        span = None
        if img.sourceline is not None:
            span = _src_value_span(fragment, line_starts[img.sourceline - 1] + img.sourcepos)
        if span is None:
            raise UnrenderableMarkupError(fragment, ValueError("cannot locate <img> tag"))

        start, end = span
        value = fragment[start:end]
        new_value = remap_url(value, asset_dir)
        if new_value != value:
            edits.append((start, end, new_value))

    for start, end, value in reversed(edits):
        fragment = fragment[:start] + value + fragment[end:]
    return fragment


def rewrite_token(token: Token, asset_dir: str) -> Token:
    """Map one token (and its children) to its rewritten form.

    The input token is left untouched; a new token is returned whenever
    anything below it changed.
    """
    kind = token["type"]

    if kind == "image":
        attrs = token.get("attrs", {})
        if "url" in attrs:
            token = {**token, "attrs": {**attrs, "url": remap_url(attrs["url"], asset_dir)}}
    elif kind in _HTML_TOKENS:
        token = {**token, "raw": rewrite_html_fragment(token["raw"], asset_dir)}

    children = token.get("children")
    if isinstance(children, list) and children:
        token = {**token, "children": [rewrite_token(child, asset_dir) for child in children]}

    return token


def iter_tokens(tokens: list[Token]) -> Iterator[Token]:
    """Walk a token tree depth-first."""
    for token in tokens:
        yield token
        children = token.get("children")
        if isinstance(children, list):
            yield from iter_tokens(children)


def _rewrite_ref_links(
    ref_links: dict[str, dict[str, Any]], image_refs: set[str], asset_dir: str
) -> dict[str, dict[str, Any]]:
    """Rewrite link definitions used by reference-style images."""
    return {
        key: {**link, "url": remap_url(link["url"], asset_dir)} if key in image_refs else link
        for key, link in ref_links.items()
    }


class MediaRewriter:
    """Rewrite image references of markdown bodies into one asset directory."""

    def __init__(self, asset_dir: str = DEFAULT_ASSET_DIR) -> None:
        self.asset_dir = asset_dir
        self._markdown = create_markdown_parser()
        self._renderer = BlogMarkdownRenderer()

    def rewrite(self, text: str) -> str:
        """Rewrite every image reference in ``text``.

        Args:
            text: Markdown body (without front matter)

        Returns:
            Re-serialized markdown with image paths moved into ``asset_dir``

        Raises:
            UnrenderableMarkupError: If an embedded HTML fragment cannot be parsed
        """
        tokens, state = self._markdown.parse(text)
        rewritten = [rewrite_token(token, self.asset_dir) for token in tokens]

        images = [t for t in iter_tokens(rewritten) if t["type"] == "image"]
        image_refs = {t["ref"] for t in images if "ref" in t}
        if image_refs:
            state.env["ref_links"] = _rewrite_ref_links(
                state.env.get("ref_links", {}), image_refs, self.asset_dir
            )

        log.debug("Rewrote media references", images=len(images), refs=len(image_refs))
        return self._renderer(rewritten, state)


def rewrite_media_refs(text: str, asset_dir: str = DEFAULT_ASSET_DIR) -> str:
    """Rewrite image references of a markdown body.

    Convenience wrapper around ``MediaRewriter``.
    """
    return MediaRewriter(asset_dir).rewrite(text)
