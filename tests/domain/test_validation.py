"""Tests for metadata validation and Document construction."""

from datetime import date, datetime
from pathlib import Path

import pytest

from pubctl.domain.content import ParsedSource
from pubctl.domain.errors import (
    AssetNotFoundError,
    DescriptionLengthWarning,
    InvalidDateError,
    InvalidFieldError,
    MissingFieldError,
)
from pubctl.domain.validation import coerce_date, validate_metadata


def _parsed(body: str = "Body.", path: Path | None = Path("content/a.md"), **fm: object):
    metadata = {
        "title": "Outbox Pattern",
        "date": date(2021, 1, 5),
        "description": "Reliable messaging.",
    }
    metadata.update(fm)
    metadata = {k: v for k, v in metadata.items() if v is not ...}
    return ParsedSource(identifier="outbox-pattern", metadata=metadata, body=body, source_path=path)


class TestCoerceDate:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (date(2021, 1, 5), date(2021, 1, 5)),
            (datetime(2021, 1, 5, 10, 30), date(2021, 1, 5)),
            ("2021-01-05", date(2021, 1, 5)),
            (" 2021-01-05 ", date(2021, 1, 5)),
            ("2021-01-05T10:30:00", date(2021, 1, 5)),
        ],
    )
    def test_accepted(self, value: object, expected: date) -> None:
        assert coerce_date(value) == expected

    @pytest.mark.parametrize("value", ["2021-02-30", "next tuesday", 20210105, None, ""])
    def test_rejected(self, value: object) -> None:
        with pytest.raises(InvalidDateError):
            coerce_date(value)


class TestValidateMetadata:
    def test_builds_document(self) -> None:
        result = validate_metadata(_parsed(body="See [uow](/unit-of-work)."))
        doc = result.document
        assert doc.identifier == "outbox-pattern"
        assert doc.title == "Outbox Pattern"
        assert doc.published_date == date(2021, 1, 5)
        assert doc.links == frozenset({"unit-of-work"})
        assert result.warnings == []

    def test_values_are_stripped(self) -> None:
        doc = validate_metadata(_parsed(title="  Spaced  ")).document
        assert doc.title == "Spaced"

    @pytest.mark.parametrize("field", ["title", "date", "description"])
    def test_missing_required_field(self, field: str) -> None:
        with pytest.raises(MissingFieldError) as exc_info:
            validate_metadata(_parsed(**{field: ...}))
        assert exc_info.value.field == field
        assert exc_info.value.path == Path("content/a.md")

    def test_missing_date_message(self) -> None:
        with pytest.raises(MissingFieldError, match="'date'"):
            validate_metadata(_parsed(date=...))

    def test_blank_title_is_missing(self) -> None:
        with pytest.raises(MissingFieldError):
            validate_metadata(_parsed(title="   "))

    def test_null_description_is_missing(self) -> None:
        with pytest.raises(MissingFieldError):
            validate_metadata(_parsed(description=None))

    def test_non_string_title(self) -> None:
        with pytest.raises(InvalidFieldError) as exc_info:
            validate_metadata(_parsed(title=2021))
        assert exc_info.value.code == "INVALID_FIELD"

    def test_non_string_featured_image(self) -> None:
        with pytest.raises(InvalidFieldError):
            validate_metadata(_parsed(featuredImage=["a.png"]))

    def test_invalid_date(self) -> None:
        with pytest.raises(InvalidDateError) as exc_info:
            validate_metadata(_parsed(date="2021-02-30"))
        assert exc_info.value.path == Path("content/a.md")

    def test_long_description_warns(self) -> None:
        result = validate_metadata(_parsed(description="x" * 20), max_description_length=10)
        assert len(result.warnings) == 1
        assert isinstance(result.warnings[0], DescriptionLengthWarning)
        assert result.warnings[0].detail() == {"length": 20, "limit": 10}

    def test_missing_asset_warns(self) -> None:
        result = validate_metadata(
            _parsed(featuredImage="/images/none.png"),
            asset_exists=lambda ref, src: False,
        )
        assert [type(w) for w in result.warnings] == [AssetNotFoundError]
        assert result.document.featured_image == "/images/none.png"

    def test_existing_asset_no_warning(self) -> None:
        result = validate_metadata(
            _parsed(featuredImage="/images/ok.png"),
            asset_exists=lambda ref, src: True,
        )
        assert result.warnings == []

    def test_no_asset_check_without_predicate(self) -> None:
        result = validate_metadata(_parsed(featuredImage="/images/none.png"))
        assert result.warnings == []

    def test_extra_keys_preserved(self) -> None:
        doc = validate_metadata(_parsed(tags=["a"], draft=False)).document
        assert doc.extra == {"tags": ["a"], "draft": False}
        fm = doc.to_frontmatter()
        assert fm["tags"] == ["a"]
        assert fm["date"] == date(2021, 1, 5)

    def test_base_path_applied_to_links(self) -> None:
        doc = validate_metadata(
            _parsed(body="[x](/blog/saga-pattern/)"),
            base_path="/blog",
        ).document
        assert doc.links == frozenset({"saga-pattern"})

    def test_index_source_links_resolve_inside_its_directory(self) -> None:
        parsed = ParsedSource(
            identifier="outbox-pattern",
            metadata=_parsed().metadata,
            body="See [details](details.md).",
            source_path=Path("content/outbox-pattern/index.md"),
            is_index=True,
        )
        assert validate_metadata(parsed).document.links == frozenset({"outbox-pattern/details"})
