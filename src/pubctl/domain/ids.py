"""Identifier derivation — stable slugs from content paths.

The identifier of a document is its path relative to the content root,
with the suffix removed and every segment normalized. A trailing
``index`` segment collapses onto its directory, so ``outbox-pattern.md``
and ``outbox-pattern/index.md`` both derive ``outbox-pattern``.

INVARIANT: derivation is a pure function of the relative path, so a
rebuild from the same tree always yields the same identifiers.
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePosixPath

INDEX_STEMS = frozenset({"index", "readme", "_index"})

_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-{2,}")


def normalize_segment(segment: str) -> str:
    """Normalize one path segment into slug form.

    Lowercases, applies NFKC normalization, turns whitespace and
    underscores into hyphens, drops anything outside ``[a-z0-9-]`` and
    collapses hyphen runs.

    Examples:
        >>> normalize_segment("Outbox Pattern")
        'outbox-pattern'
        >>> normalize_segment("unit_of_work")
        'unit-of-work'
    """
    text = unicodedata.normalize("NFKC", segment).lower()
    text = _SEPARATORS.sub("-", text.strip())
    text = _DISALLOWED.sub("", text)
    text = _HYPHEN_RUNS.sub("-", text)
    return text.strip("-")


def identifier_from_parts(parts: list[str] | tuple[str, ...]) -> str:
    """Join normalized path segments into an identifier.

    Empty segments and a trailing index stem are dropped.
    """
    segments = [normalize_segment(p) for p in parts]
    segments = [s for s in segments if s]
    if len(segments) > 1 and segments[-1] in INDEX_STEMS:
        segments = segments[:-1]
    return "/".join(segments)


def derive_identifier(relative_path: str | PurePosixPath) -> str:
    """Derive the identifier for a content file relative to the content root.

    Raises:
        ValueError: If the path normalizes to an empty identifier.
    """
    path = PurePosixPath(relative_path)
    parts = [*path.parent.parts, path.stem] if path.suffix else list(path.parts)
    identifier = identifier_from_parts([p for p in parts if p not in ("", ".")])
    if not identifier:
        msg = f"Cannot derive an identifier from {str(relative_path)!r}"
        raise ValueError(msg)
    return identifier


def is_index_path(relative_path: str | PurePosixPath) -> bool:
    """Whether *relative_path* is an index file that collapses onto its directory.

    A top-level ``index.md`` keeps its own identifier and is not an index
    in this sense.
    """
    path = PurePosixPath(relative_path)
    stem = path.stem if path.suffix else path.name
    if normalize_segment(stem) not in INDEX_STEMS:
        return False
    return any(normalize_segment(p) for p in path.parent.parts if p not in ("", "."))
