"""Tests for identifier derivation."""

import pytest

from pubctl.domain.ids import (
    derive_identifier,
    identifier_from_parts,
    is_index_path,
    normalize_segment,
)


class TestNormalizeSegment:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("Outbox Pattern", "outbox-pattern"),
            ("unit_of_work", "unit-of-work"),
            ("CQRS & Event Sourcing", "cqrs-event-sourcing"),
            ("--leading--trailing--", "leading-trailing"),
            ("Ｆｕｌｌｗｉｄｔｈ", "fullwidth"),
        ],
    )
    def test_normalization(self, raw: str, expected: str) -> None:
        assert normalize_segment(raw) == expected


class TestDeriveIdentifier:
    def test_flat_file(self) -> None:
        assert derive_identifier("outbox-pattern.md") == "outbox-pattern"

    def test_nested_file(self) -> None:
        assert (
            derive_identifier("design-patterns/repository-pattern.md")
            == "design-patterns/repository-pattern"
        )

    def test_index_collapses_onto_directory(self) -> None:
        assert derive_identifier("outbox-pattern/index.md") == "outbox-pattern"
        assert derive_identifier("guides/README.md") == "guides"

    def test_flat_and_index_forms_collide(self) -> None:
        assert derive_identifier("outbox-pattern.md") == derive_identifier(
            "outbox-pattern/index.md"
        )

    def test_top_level_index_keeps_its_name(self) -> None:
        assert derive_identifier("index.md") == "index"

    def test_deterministic(self) -> None:
        assert derive_identifier("A/B C.md") == derive_identifier("A/B C.md") == "a/b-c"

    def test_empty_identifier_rejected(self) -> None:
        with pytest.raises(ValueError, match="Cannot derive"):
            derive_identifier("!!!.md")


class TestIdentifierFromParts:
    def test_drops_empty_segments(self) -> None:
        assert identifier_from_parts(["posts", "???", "hello"]) == "posts/hello"


class TestIsIndexPath:
    @pytest.mark.parametrize(
        "path",
        ["outbox-pattern/index.md", "guides/README.md", "docs/_index.md", "a/b/index.markdown"],
    )
    def test_nested_index_files(self, path: str) -> None:
        assert is_index_path(path)

    @pytest.mark.parametrize("path", ["index.md", "outbox-pattern.md", "guides/indexing.md"])
    def test_not_index(self, path: str) -> None:
        assert not is_index_path(path)
