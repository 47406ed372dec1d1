"""Front matter parsing and rendering — pure functions, no file I/O.

A content file is a ``---`` delimited YAML mapping followed by free-form
Markdown body text. Parsing yields a generic ``(mapping, body)`` pair;
projecting that mapping onto the typed :class:`~pubctl.domain.document.Document`
is the validator's job (:mod:`pubctl.domain.validation`).

File discovery and reads live in :mod:`pubctl.infrastructure.filesystem`
so the dependency direction stays infrastructure -> domain.
"""

from __future__ import annotations

from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pubctl.domain.errors import MalformedFrontMatterError

# ---------------------------------------------------------------------------
# YAML parser (round-trip preserves comments and quote styles)
# ---------------------------------------------------------------------------


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML parser.

    ruamel.yaml's YAML object is stateful; a failed dump can leave a shared
    instance broken, so every call gets its own.
    """
    y = YAML()
    y.preserve_quotes = True
    y.default_flow_style = False
    return y


# ---------------------------------------------------------------------------
# Canonical front matter key ordering
# ---------------------------------------------------------------------------

CANONICAL_KEY_ORDER: list[str] = [
    "title",
    "date",
    "description",
    "featuredImage",
]

_FRONTMATTER_DELIMITER = "---"


@dataclass(frozen=True)
class ParsedSource:
    """A source file split into its raw front matter mapping and body.

    Nothing here has been validated yet.
    """

    identifier: str
    metadata: dict[str, Any]
    body: str
    source_path: Path | None = None
    is_index: bool = False  # index/readme file: its identifier is its directory


# ---------------------------------------------------------------------------
# Parsing / rendering
# ---------------------------------------------------------------------------


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Split *content* into a front matter mapping and body text.

    The first line must be ``---`` and a later line must close the block
    with ``---``. Handles both ``\\n`` and ``\\r\\n`` line endings. An empty
    block yields an empty mapping.

    Raises:
        MalformedFrontMatterError: If either delimiter is missing, the block
            is not valid YAML, or it is not a key/value mapping.
    """
    normalized = content.replace("\r\n", "\n")
    if normalized.startswith("\ufeff"):
        normalized = normalized[1:]
    lines = normalized.split("\n")
    if not lines or lines[0].strip() != _FRONTMATTER_DELIMITER:
        msg = "Front matter must start with '---' on the first line"
        raise MalformedFrontMatterError(msg)

    end_idx: int | None = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == _FRONTMATTER_DELIMITER:
            end_idx = i
            break

    if end_idx is None:
        msg = "Front matter is missing its closing '---' delimiter"
        raise MalformedFrontMatterError(msg)

    yaml_block = "\n".join(lines[1:end_idx])
    body = "\n".join(lines[end_idx + 1 :])
    if body.startswith("\n"):
        body = body[1:]

    try:
        loaded = _new_yaml().load(yaml_block)
    except (YAMLError, ValueError) as exc:
        # ValueError: an unquoted impossible timestamp such as 2021-02-30
        msg = f"Front matter is not valid YAML: {exc}"
        raise MalformedFrontMatterError(msg) from exc

    if loaded is None:
        return {}, body
    if not isinstance(loaded, dict):
        msg = f"Front matter must be key/value pairs, got {type(loaded).__name__}"
        raise MalformedFrontMatterError(msg)

    fm: dict[str, Any] = {}
    for key, value in loaded.items():
        if not isinstance(key, str):
            msg = f"Front matter keys must be strings, got {key!r}"
            raise MalformedFrontMatterError(msg)
        fm[key] = value
    return fm, body


def parse_document(
    content: str,
    *,
    identifier: str,
    source_path: Path | None = None,
    is_index: bool = False,
) -> ParsedSource:
    """Parse raw source text into a :class:`ParsedSource`.

    Any :class:`MalformedFrontMatterError` is tagged with *source_path*.
    """
    try:
        fm, body = parse_frontmatter(content)
    except MalformedFrontMatterError as exc:
        if source_path is not None:
            exc.with_path(source_path)
        raise
    return ParsedSource(
        identifier=identifier,
        metadata=fm,
        body=body,
        source_path=source_path,
        is_index=is_index,
    )


def order_frontmatter(fm: dict[str, Any]) -> dict[str, Any]:
    """Return *fm* with keys in canonical order.

    Keys in :data:`CANONICAL_KEY_ORDER` come first, remaining keys follow
    alphabetically. ``None`` values are omitted.
    """
    ordered: dict[str, Any] = {}
    for key in CANONICAL_KEY_ORDER:
        if key in fm and fm[key] is not None:
            ordered[key] = fm[key]

    for key in sorted(fm.keys()):
        if key not in ordered and fm[key] is not None:
            ordered[key] = fm[key]

    return ordered


def render_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render a front matter mapping and body back into Markdown source."""
    ordered = order_frontmatter(frontmatter)
    buf = StringIO()
    if ordered:
        _new_yaml().dump(ordered, buf)
    yaml_text = buf.getvalue()

    parts = [_FRONTMATTER_DELIMITER, "\n", yaml_text, _FRONTMATTER_DELIMITER, "\n"]
    if body:
        parts.append(body)
    return "".join(parts)
