"""Filesystem operations for source content and assets.

INVARIANT: Files are truth. Every publish cycle re-derives its documents
from the content tree; nothing is cached between cycles.

Pure parsing lives in :mod:`pubctl.domain.content` (dependency direction:
infrastructure -> domain). This module handles file discovery, reads and
asset lookups.
"""

from __future__ import annotations

import fnmatch
from collections.abc import Iterable
from pathlib import Path, PurePosixPath

from pubctl.domain.content import ParsedSource, parse_document
from pubctl.domain.ids import derive_identifier, is_index_path
from pubctl.domain.links import is_external

CONTENT_SUFFIXES = frozenset({".md", ".markdown"})

# Directories to skip when discovering content files.
_SKIP_DIRS = frozenset({".git", ".pubctl", "node_modules", "__pycache__"})


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def _excluded(relative: PurePosixPath, exclude: Iterable[str]) -> bool:
    text = relative.as_posix()
    return any(fnmatch.fnmatch(text, pattern) for pattern in exclude)


def find_source_files(
    content_root: Path,
    *,
    exclude: Iterable[str] = (),
) -> list[Path]:
    """Discover all Markdown source files under *content_root*.

    Skips hidden directories, :data:`_SKIP_DIRS`, and any path whose
    root-relative POSIX form matches one of the *exclude* glob patterns.
    Returns paths sorted for deterministic processing order.
    """
    if not content_root.is_dir():
        return []

    patterns = list(exclude)
    results: list[Path] = []
    for path in content_root.rglob("*"):
        if not path.is_file() or path.suffix.lower() not in CONTENT_SUFFIXES:
            continue
        relative = PurePosixPath(path.relative_to(content_root).as_posix())
        if any(part in _SKIP_DIRS or part.startswith(".") for part in relative.parts[:-1]):
            continue
        if patterns and _excluded(relative, patterns):
            continue
        results.append(path)

    return sorted(results)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_source_file(content_root: Path, path: Path) -> ParsedSource:
    """Read and parse one source file.

    Raises:
        MalformedFrontMatterError: Propagated from the parser, tagged with
            *path*.
        OSError: If the file cannot be read.
    """
    content = path.read_text(encoding="utf-8")
    relative = path.relative_to(content_root).as_posix()
    return parse_document(
        content,
        identifier=derive_identifier(relative),
        source_path=path,
        is_index=is_index_path(relative),
    )


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


class AssetStore:
    """Resolves featured image references to files on disk.

    - ``/images/x.png`` resolves under the asset root.
    - ``./x.png`` or ``x.png`` resolves next to the source file.
    - External URLs are accepted without a lookup.
    """

    def __init__(self, asset_root: Path) -> None:
        self._root = asset_root

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, reference: str, source_path: Path | None) -> Path | None:
        """Return the filesystem path *reference* points at, if it is local."""
        if is_external(reference):
            return None
        clean = reference.split("?", 1)[0].split("#", 1)[0]
        if clean.startswith("/"):
            return self._root / clean.lstrip("/")
        base = source_path.parent if source_path is not None else self._root
        return base / clean

    def exists(self, reference: str, source_path: Path | None = None) -> bool:
        """Whether *reference* resolves to an existing file."""
        if is_external(reference):
            return True
        resolved = self.resolve(reference, source_path)
        return resolved is not None and resolved.is_file()
