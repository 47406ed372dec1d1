"""Metadata validation — project a generic front matter mapping onto Document.

Parsing (:mod:`pubctl.domain.content`) accepts any key/value mapping. This
module enforces the fixed schema: ``title``, ``date`` and ``description``
are required, ``date`` must be a calendar date, ``featuredImage`` is
optional. Failures raise; nothing is silently defaulted.

Asset existence is an I/O question, so the caller injects an
``asset_exists`` predicate (see :mod:`pubctl.infrastructure.filesystem`).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Any

from pubctl.domain.content import ParsedSource
from pubctl.domain.document import FRONTMATTER_FIELDS, REQUIRED_FIELDS, Document
from pubctl.domain.errors import (
    AssetNotFoundError,
    DescriptionLengthWarning,
    InvalidDateError,
    InvalidFieldError,
    MissingFieldError,
    PublishError,
)
from pubctl.domain.links import extract_internal_links

DEFAULT_MAX_DESCRIPTION_LENGTH = 300

AssetPredicate = Callable[[str, Path | None], bool]


@dataclass(frozen=True)
class ValidationResult:
    """A validated document plus the non-fatal issues found on the way."""

    document: Document
    warnings: list[PublishError] = field(default_factory=list)


def coerce_date(value: Any) -> date:
    """Interpret a front matter ``date`` value as a calendar date.

    Accepts ``date`` and ``datetime`` objects (YAML loads unquoted ISO
    dates as such) and ISO 8601 date or datetime strings.

    Raises:
        InvalidDateError: For anything else, including impossible dates
            such as ``2021-02-30``.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text).date()
        except ValueError:
            pass
    raise InvalidDateError(value)


def _required_text(fm: dict[str, Any], key: str) -> str:
    if key not in fm or fm[key] is None:
        raise MissingFieldError(key)
    value = fm[key]
    if not isinstance(value, str):
        raise InvalidFieldError(key, value)
    text = str(value).strip()
    if not text:
        raise MissingFieldError(key)
    return text


def validate_metadata(
    parsed: ParsedSource,
    *,
    max_description_length: int = DEFAULT_MAX_DESCRIPTION_LENGTH,
    base_path: str = "/",
    asset_exists: AssetPredicate | None = None,
) -> ValidationResult:
    """Validate *parsed* and build its :class:`Document`.

    Raises:
        MissingFieldError: A required field is absent or blank.
        InvalidFieldError: ``title``/``description``/``featuredImage`` is
            not a string.
        InvalidDateError: ``date`` is not a calendar date.

    Errors carry the source path of *parsed*.
    """
    fm = parsed.metadata
    try:
        for key in REQUIRED_FIELDS:
            if key not in fm or fm[key] is None:
                raise MissingFieldError(key)
        title = _required_text(fm, "title")
        published = coerce_date(fm["date"])
        description = _required_text(fm, "description")
        featured = fm.get("featuredImage")
        if featured is not None and not isinstance(featured, str):
            raise InvalidFieldError("featuredImage", featured)
    except PublishError as exc:
        if parsed.source_path is not None:
            exc.with_path(parsed.source_path)
        raise

    warnings: list[PublishError] = []
    if len(description) > max_description_length:
        warnings.append(
            DescriptionLengthWarning(
                len(description), max_description_length, path=parsed.source_path
            )
        )

    featured_image = str(featured).strip() if featured is not None else None
    if featured_image and asset_exists is not None:
        if not asset_exists(featured_image, parsed.source_path):
            warnings.append(AssetNotFoundError(featured_image, path=parsed.source_path))

    extra = {k: v for k, v in fm.items() if k not in FRONTMATTER_FIELDS}
    document = Document(
        identifier=parsed.identifier,
        title=title,
        published_date=published,
        description=description,
        featured_image=featured_image or None,
        body=parsed.body,
        links=extract_internal_links(
            parsed.body,
            source_identifier=parsed.identifier,
            source_dir=parsed.identifier if parsed.is_index else None,
            base_path=base_path,
        ),
        source_path=parsed.source_path,
        extra=extra,
    )
    return ValidationResult(document=document, warnings=warnings)
