"""Tests for front matter parsing and rendering."""

from datetime import date
from pathlib import Path

import pytest

from pubctl.domain.content import (
    CANONICAL_KEY_ORDER,
    ParsedSource,
    order_frontmatter,
    parse_document,
    parse_frontmatter,
    render_frontmatter,
)
from pubctl.domain.errors import MalformedFrontMatterError

ARTICLE = """\
---
title: Outbox Pattern
date: 2021-01-05
description: Reliable messaging without two-phase commit.
featuredImage: /images/outbox.png
---
# Outbox

Body text.
"""


class TestParseFrontmatter:
    def test_splits_mapping_and_body(self) -> None:
        fm, body = parse_frontmatter(ARTICLE)
        assert fm["title"] == "Outbox Pattern"
        assert fm["date"] == date(2021, 1, 5)
        assert fm["featuredImage"] == "/images/outbox.png"
        assert body.startswith("# Outbox")

    def test_crlf_line_endings(self) -> None:
        fm, body = parse_frontmatter(ARTICLE.replace("\n", "\r\n"))
        assert fm["title"] == "Outbox Pattern"
        assert "Body text." in body

    def test_byte_order_mark_is_ignored(self) -> None:
        fm, _ = parse_frontmatter("\ufeff" + ARTICLE)
        assert fm["title"] == "Outbox Pattern"

    def test_empty_block(self) -> None:
        fm, body = parse_frontmatter("---\n---\nJust a body.\n")
        assert fm == {}
        assert body == "Just a body.\n"

    def test_extra_keys_are_kept(self) -> None:
        fm, _ = parse_frontmatter("---\ntitle: T\ntags: [a, b]\n---\n")
        assert list(fm["tags"]) == ["a", "b"]

    def test_missing_opening_delimiter(self) -> None:
        with pytest.raises(MalformedFrontMatterError, match="start with"):
            parse_frontmatter("title: No fences\n")

    def test_missing_closing_delimiter(self) -> None:
        with pytest.raises(MalformedFrontMatterError, match="closing"):
            parse_frontmatter("---\ntitle: Open\nbody\n")

    def test_invalid_yaml(self) -> None:
        with pytest.raises(MalformedFrontMatterError, match="not valid YAML"):
            parse_frontmatter("---\ntitle: [unclosed\n---\n")

    def test_non_mapping_block(self) -> None:
        with pytest.raises(MalformedFrontMatterError, match="key/value"):
            parse_frontmatter("---\n- a\n- b\n---\n")

    def test_non_string_key(self) -> None:
        with pytest.raises(MalformedFrontMatterError, match="keys must be strings"):
            parse_frontmatter("---\n1: one\n---\n")

    def test_error_code(self) -> None:
        with pytest.raises(MalformedFrontMatterError) as exc_info:
            parse_frontmatter("no front matter")
        assert exc_info.value.code == "MALFORMED_FRONT_MATTER"


class TestParseDocument:
    def test_returns_parsed_source(self) -> None:
        parsed = parse_document(ARTICLE, identifier="outbox-pattern", source_path=Path("a.md"))
        assert isinstance(parsed, ParsedSource)
        assert parsed.identifier == "outbox-pattern"
        assert parsed.metadata["title"] == "Outbox Pattern"
        assert parsed.source_path == Path("a.md")

    def test_error_is_tagged_with_path(self) -> None:
        with pytest.raises(MalformedFrontMatterError) as exc_info:
            parse_document("oops", identifier="x", source_path=Path("content/x.md"))
        assert exc_info.value.path == Path("content/x.md")


class TestRenderFrontmatter:
    def test_canonical_order_first(self) -> None:
        ordered = order_frontmatter(
            {"zeta": 1, "description": "d", "title": "t", "alpha": 2, "date": "x"}
        )
        assert list(ordered) == ["title", "date", "description", "alpha", "zeta"]
        assert CANONICAL_KEY_ORDER[0] == "title"

    def test_none_values_dropped(self) -> None:
        assert "featuredImage" not in order_frontmatter({"title": "t", "featuredImage": None})

    def test_round_trip_preserves_required_fields(self) -> None:
        fm, body = parse_frontmatter(ARTICLE)
        rendered = render_frontmatter(fm, body)
        again, again_body = parse_frontmatter(rendered)
        for key in ("title", "date", "description"):
            assert again[key] == fm[key]
        assert again_body == body

    def test_render_shape(self) -> None:
        text = render_frontmatter({"title": "T"}, "body\n")
        assert text.startswith("---\ntitle: T\n---\n")
        assert text.endswith("body\n")
