"""Link extraction — internal Markdown references between documents.

Pure functions, no infrastructure dependencies. Consumed by the validator
when a :class:`~pubctl.domain.document.Document` is built and by the
cross-reference resolver.

Only internal links are extracted: external URLs, pure fragments, image
embeds, asset files and anything inside code are ignored. Targets are
normalized with the same rules as identifiers
(:func:`pubctl.domain.ids.identifier_from_parts`) so a link can be looked
up in the registry directly.
"""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass
from urllib.parse import unquote

from pubctl.domain.ids import identifier_from_parts

# [Text](target) or [Text](target "Title"); the lookbehind skips ![image](...)
_INLINE_LINK = re.compile(
    r"(?<!!)\[(?P<text>[^\]]*)\]"
    r"\(\s*<?(?P<target>[^)\s>]+)>?(?:\s+[\"'(].*?[\"')])?\s*\)"
)
# [label]: target  (reference-style definition)
_REFERENCE_DEF = re.compile(
    r"^\s{0,3}\[(?P<text>[^\]^][^\]]*)\]:\s*<?(?P<target>\S+?)>?(?:\s+.*)?$",
    re.MULTILINE,
)
_FENCE = re.compile(r"^(?P<indent>\s{0,3})(?P<fence>`{3,}|~{3,})")
_INLINE_CODE = re.compile(r"(`+)(?:(?!\1).)+?\1", re.DOTALL)
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*:")

_MARKDOWN_SUFFIXES = (".md", ".markdown")


@dataclass(frozen=True)
class MarkdownLink:
    """A link as written in the body, before resolution."""

    raw: str  # target exactly as written
    text: str


def strip_code(body: str) -> str:
    """Blank out fenced code blocks and inline code spans.

    Fences opened with ``` or ~~~ close on a line starting with at least as
    many of the same character. An unclosed fence runs to the end of the
    body.
    """
    kept: list[str] = []
    fence: str | None = None
    for line in body.split("\n"):
        match = _FENCE.match(line)
        if fence is None:
            if match:
                fence = match.group("fence")
                kept.append("")
                continue
            kept.append(line)
        else:
            closing = match.group("fence") if match else ""
            if closing.startswith(fence[0]) and len(closing) >= len(fence):
                fence = None
            kept.append("")
    return _INLINE_CODE.sub("", "\n".join(kept))


def extract_markdown_links(body: str) -> list[MarkdownLink]:
    """Extract every inline and reference-style link target from *body*.

    Code is stripped first. Returns links in order of appearance, inline
    links before reference definitions.
    """
    text = strip_code(body)
    results: list[MarkdownLink] = []
    for match in _INLINE_LINK.finditer(text):
        results.append(MarkdownLink(raw=match.group("target").strip(), text=match.group("text")))
    for match in _REFERENCE_DEF.finditer(text):
        results.append(MarkdownLink(raw=match.group("target").strip(), text=match.group("text")))
    return results


def is_external(target: str) -> bool:
    """Whether *target* points outside the site (has a scheme or host)."""
    return target.startswith("//") or _SCHEME.match(target) is not None


def resolve_link_target(
    target: str,
    *,
    source_identifier: str,
    source_dir: str | None = None,
    base_path: str = "/",
) -> str | None:
    """Turn a written link target into an identifier, or None if not internal.

    Absolute targets are resolved from the site root after removing
    *base_path*; relative targets are resolved against *source_dir*,
    which defaults to the directory of *source_identifier*. Index files
    pass their own identifier since it already names their directory.
    Percent-escapes are decoded before normalizing. ``.md`` suffixes and
    ``index`` segments are dropped. Targets that name any other file type are assets, not
    documents, and yield None.

    Examples:
        >>> resolve_link_target("/design-patterns/outbox/", source_identifier="a")
        'design-patterns/outbox'
        >>> resolve_link_target("../uow.md#intro", source_identifier="patterns/outbox")
        'uow'
    """
    if not target or target.startswith("#") or is_external(target):
        return None

    path = unquote(target.split("#", 1)[0].split("?", 1)[0])
    if not path:
        return None

    if path.startswith("/"):
        prefix = "/" + base_path.strip("/")
        if prefix != "/" and (path == prefix or path.startswith(prefix + "/")):
            path = path[len(prefix) :] or "/"
        joined = path
    else:
        if source_dir is None:
            source_dir = posixpath.dirname(source_identifier)
        joined = posixpath.join("/", source_dir, path)

    normalized = posixpath.normpath(joined)
    tail = posixpath.basename(normalized)
    _, ext = posixpath.splitext(tail)
    if ext:
        if ext.lower() not in _MARKDOWN_SUFFIXES:
            return None
        normalized = normalized[: -len(ext)]

    parts = [p for p in normalized.split("/") if p not in ("", ".", "..")]
    identifier = identifier_from_parts(parts)
    return identifier or None


def extract_internal_links(
    body: str,
    *,
    source_identifier: str,
    source_dir: str | None = None,
    base_path: str = "/",
) -> frozenset[str]:
    """Return the set of internal identifiers referenced by *body*.

    Self-references are dropped.
    """
    found: set[str] = set()
    for link in extract_markdown_links(body):
        identifier = resolve_link_target(
            link.raw,
            source_identifier=source_identifier,
            source_dir=source_dir,
            base_path=base_path,
        )
        if identifier is not None and identifier != source_identifier:
            found.add(identifier)
    return frozenset(found)
