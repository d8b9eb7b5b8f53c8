"""Tests for frontmatter module."""

from datetime import date

import pytest
import yaml

from convmd.exceptions import MalformedFrontMatterError
from convmd.markdown.frontmatter import (
    FRONTMATTER_PATTERN,
    Metadata,
    SourceDocument,
    parse_date,
    parse_metadata,
    render_frontmatter,
    split_frontmatter,
)


class TestFrontmatterPattern:
    """Tests for FRONTMATTER_PATTERN regex."""

    def test_matches_basic_frontmatter(self):
        """Test matching basic frontmatter."""
        text = "---\ntitle: Test\n---\n\nContent"
        match = FRONTMATTER_PATTERN.match(text)
        assert match is not None
        assert "title: Test" in match.group(1)

    def test_no_match_without_frontmatter(self):
        """Test no match when frontmatter is absent."""
        assert FRONTMATTER_PATTERN.match("# Title\n\nContent") is None

    def test_no_match_mid_document(self):
        """Test frontmatter must be at start."""
        assert FRONTMATTER_PATTERN.match("Content\n---\ntitle: Test\n---\n") is None

    def test_delimiter_must_be_whole_line(self):
        """Test a line merely starting with --- does not close the block."""
        text = "---\ntitle: a\n---- not a delimiter\nmore: b\n---\nbody"
        match = FRONTMATTER_PATTERN.match(text)
        assert match is not None
        assert "more: b" in match.group(1)


class TestSplitFrontmatter:
    """Tests for split_frontmatter."""

    def test_returns_block_and_body_offset(self):
        text = "---\ntitle: Test\n---\nBody text\n"
        block, offset = split_frontmatter(text)
        assert block == "title: Test\n"
        assert text[offset:] == "Body text\n"

    def test_none_without_delimiters(self):
        assert split_frontmatter("# Just a heading\n") is None

    def test_first_closing_delimiter_wins(self):
        """Test later --- lines (thematic breaks, code) stay in the body."""
        text = "---\ntitle: Test\n---\nIntro\n\n---\n\n```yaml\n---\nkey: v\n---\n```\n"
        block, offset = split_frontmatter(text)
        assert block == "title: Test\n"
        body = text[offset:]
        assert body.startswith("Intro")
        assert "```yaml\n---\nkey: v\n---\n```" in body

    def test_empty_block(self):
        block, offset = split_frontmatter("---\n---\nBody")
        assert block == ""
        assert offset == len("---\n---\n")

    def test_crlf_line_endings(self):
        text = "---\r\ntitle: Test\r\n---\r\nBody"
        block, offset = split_frontmatter(text)
        assert "title: Test" in block
        assert text[offset:] == "Body"

    def test_trailing_whitespace_after_delimiters(self):
        block, offset = split_frontmatter("--- \ntitle: Test\n---\t\nBody")
        assert block == "title: Test\n"

    def test_byte_order_mark(self):
        text = "\ufeff---\ntitle: Test\n---\nBody"
        block, offset = split_frontmatter(text)
        assert block == "title: Test\n"
        assert text[offset:] == "Body"

    def test_closing_delimiter_at_end_of_file(self):
        text = "---\ntitle: Test\n---"
        block, offset = split_frontmatter(text)
        assert block == "title: Test\n"
        assert text[offset:] == ""


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "text",
        [
            "2021-03-05",
            "2021/03/05",
            "2021.03.05",
            "2021-03-05 10:30",
            "2021-03-05T10:30:00",
            "2021-03-05 10:30:00",
            "Mar 5, 2021",
            "March 5, 2021",
            "5 Mar 2021",
        ],
    )
    def test_accepted_encodings(self, text):
        assert parse_date(text) == date(2021, 3, 5)

    def test_rejects_garbage(self):
        with pytest.raises(ValueError):
            parse_date("next tuesday")


class TestMetadata:
    """Tests for Metadata model."""

    def test_defaults(self):
        meta = Metadata()
        assert meta.title is None
        assert meta.date is None
        assert meta.tags == []

    def test_tags_scalar_becomes_list(self):
        assert Metadata.model_validate({"tags": "linux"}).tags == ["linux"]

    def test_tags_sequence_keeps_order_and_duplicates(self):
        meta = Metadata.model_validate({"tags": ["b", "a", "b"]})
        assert meta.tags == ["b", "a", "b"]

    def test_tags_null_becomes_empty(self):
        assert Metadata.model_validate({"tags": None}).tags == []

    def test_date_from_datetime_drops_time(self):
        meta = parse_metadata("date: 2021-03-05 10:20:30\n")
        assert meta.date == date(2021, 3, 5)

    def test_numeric_title_coerced(self):
        assert Metadata.model_validate({"title": 2048}).title == "2048"

    def test_empty_title_is_present(self):
        meta = Metadata.model_validate({"title": ""})
        assert meta.title == ""

    def test_unknown_keys_ignored(self):
        meta = Metadata.model_validate({"title": "T", "author": "someone", "draft": True})
        assert meta.title == "T"
        assert not hasattr(meta, "author")


class TestParseMetadata:
    """Tests for parse_metadata."""

    def test_full_block(self):
        meta = parse_metadata("title: Hello\ndate: 2021-03-05\ntags: [linux, shell]\n")
        assert meta.title == "Hello"
        assert meta.date == date(2021, 3, 5)
        assert meta.tags == ["linux", "shell"]

    def test_empty_block(self):
        assert parse_metadata("") == Metadata()

    def test_invalid_yaml(self):
        with pytest.raises(MalformedFrontMatterError, match="Invalid YAML"):
            parse_metadata("title: [unclosed\n")

    def test_non_mapping(self):
        with pytest.raises(MalformedFrontMatterError, match="must be a mapping"):
            parse_metadata("- just\n- a list\n")

    def test_invalid_date_value(self):
        with pytest.raises(MalformedFrontMatterError, match="date"):
            parse_metadata("date: someday\n")


class TestSourceDocument:
    """Tests for SourceDocument."""

    def test_from_text_with_frontmatter(self):
        doc = SourceDocument.from_text("---\ntitle: T\n---\nBody\n", "post")
        assert doc.name_stem == "post"
        assert doc.front_matter is not None
        assert doc.front_matter.title == "T"
        assert doc.body == "Body\n"

    def test_from_text_without_frontmatter(self):
        doc = SourceDocument.from_text("# Only body\n", "post")
        assert doc.front_matter is None
        assert doc.body_offset == 0
        assert doc.body == "# Only body\n"

    def test_from_text_malformed(self):
        with pytest.raises(MalformedFrontMatterError):
            SourceDocument.from_text("---\n: : :\n  - [\n---\nBody", "post")

    def test_from_path(self, tmp_path):
        path = tmp_path / "hello.markdown"
        path.write_text("---\ntitle: T\n---\nBody", encoding="utf-8")
        doc = SourceDocument.from_path(path)
        assert doc.name_stem == "hello"
        assert doc.raw_text.startswith("---")


class TestRenderFrontmatter:
    """Tests for render_frontmatter."""

    def test_keeps_key_order(self):
        text = render_frontmatter({"title": "T", "date": "2021-03-05", "layout": "post"})
        lines = text.splitlines()
        assert lines[0] == "---"
        assert lines[-1] == "---"
        assert [line.split(":")[0] for line in lines[1:-1]] == ["title", "date", "layout"]

    def test_round_trips_through_yaml(self):
        data = {"title": "Ünïcode: with colon", "mathjax": True, "category": ["other"]}
        text = render_frontmatter(data)
        block, _ = split_frontmatter(text)
        assert yaml.safe_load(block) == data
        assert "Ünïcode" in text
