"""Markdown parsing and serialization on top of mistune.

mistune's ``MarkdownRenderer`` only knows the core CommonMark tokens. The
renderer here also writes back the tokens produced by the plugins in
``MARKDOWN_PLUGINS`` so that tables, footnotes, task lists, strikethrough
and math survive a parse/render round trip.
"""

from typing import Any

from mistune.core import BlockState, InlineState
from mistune.inline_parser import InlineParser
from mistune.markdown import Markdown
from mistune.plugins import import_plugin
from mistune.renderers.markdown import MarkdownRenderer

from convmd.config.constants import MARKDOWN_PLUGINS

Token = dict[str, Any]

_ALIGN_MARKERS = {
    None: "---",
    "left": ":---",
    "center": ":---:",
    "right": "---:",
}


class VerbatimEscapeInlineParser(InlineParser):
    """Inline parser that keeps backslash escapes as written.

    The stock parser unescapes ``\\*`` to ``*``, which turns literal
    characters back into markup once the tree is serialized again.
    """

    def parse_escape(self, m, state: InlineState) -> int:
        state.append_token({"type": "text", "raw": m.group(0)})
        return m.end()


def create_markdown_parser(plugins: tuple[str, ...] = MARKDOWN_PLUGINS) -> Markdown:
    """Create a mistune parser that yields tokens instead of HTML."""
    return Markdown(
        renderer=None,
        inline=VerbatimEscapeInlineParser(),
        plugins=[import_plugin(name) for name in plugins],
    )


def _restore_task_marker(item: Token) -> Token:
    """Turn a ``task_list_item`` back into a list item led by ``[ ]``/``[x]``."""
    if item["type"] != "task_list_item":
        return item

    marker = "[x] " if item.get("attrs", {}).get("checked") else "[ ] "
    children = list(item["children"])
    if children and "children" in children[0]:
        first = children[0]
        children[0] = {**first, "children": [{"type": "text", "raw": marker}, *first["children"]]}
    else:
        children.insert(0, {"type": "block_text", "children": [{"type": "text", "raw": marker}]})
    return {**item, "type": "list_item", "children": children}


def _render_row(renderer: MarkdownRenderer, cells: list[Token], state: BlockState) -> str:
    return "| " + " | ".join(renderer.render_children(cell, state) for cell in cells) + " |"


class BlogMarkdownRenderer(MarkdownRenderer):
    """Markdown renderer covering the enabled mistune plugins."""

    def list(self, token: Token, state: BlockState) -> str:
        token = {**token, "children": [_restore_task_marker(c) for c in token["children"]]}
        text = super().list(token, state)
        if "parent" in token:
            return text
        # A top-level list must be closed by a blank line or the next paragraph
        # would be read back as a lazy continuation of its last item.
        return text.rstrip("\n") + "\n\n"

    def strikethrough(self, token: Token, state: BlockState) -> str:
        return "~~" + self.render_children(token, state) + "~~"

    def inline_math(self, token: Token, state: BlockState) -> str:
        return "$" + token["raw"] + "$"

    def block_math(self, token: Token, state: BlockState) -> str:
        return "$$\n" + token["raw"] + "\n$$\n\n"

    def footnote_ref(self, token: Token, state: BlockState) -> str:
        return "[^" + token["raw"] + "]"

    def footnotes(self, token: Token, state: BlockState) -> str:
        return "".join(self.render_token(item, state) for item in token["children"])

    def footnote_item(self, token: Token, state: BlockState) -> str:
        key = token["attrs"]["key"]
        lines = self.render_children(token, state).strip().splitlines()
        out = "[^" + key + "]: " + (lines[0] if lines else "") + "\n"
        for line in lines[1:]:
            out += ("    " + line if line else "") + "\n"
        return out + "\n"

    def table(self, token: Token, state: BlockState) -> str:
        head: list[str] = []
        body: list[str] = []
        aligns: list[str | None] = []

        for section in token["children"]:
            if section["type"] == "table_head":
                cells = section["children"]
                aligns = [cell.get("attrs", {}).get("align") for cell in cells]
                head.append(_render_row(self, cells, state))
            elif section["type"] == "table_body":
                for row in section["children"]:
                    body.append(_render_row(self, row["children"], state))

        delimiter = "| " + " | ".join(_ALIGN_MARKERS.get(a, "---") for a in aligns) + " |"
        return "\n".join([*head, delimiter, *body]) + "\n\n"


def render_markdown(tokens: list[Token], state: BlockState) -> str:
    """Serialize a token stream back to markdown text."""
    return BlogMarkdownRenderer()(tokens, state)
