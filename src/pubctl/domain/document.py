"""Document — the typed, validated record of one content file.

Documents are built only by :func:`pubctl.domain.validation.validate_metadata`
and are frozen from then on. A publish cycle never mutates a Document; the
next cycle re-derives every Document from source.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Front matter key -> Document attribute for the fixed schema.
FRONTMATTER_FIELDS: dict[str, str] = {
    "title": "title",
    "date": "published_date",
    "description": "description",
    "featuredImage": "featured_image",
}

REQUIRED_FIELDS: tuple[str, ...] = ("title", "date", "description")


class Document(BaseModel):
    """A validated article ready for registration."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    identifier: str
    title: str
    published_date: date
    description: str
    featured_image: str | None = None
    body: str = ""
    links: frozenset[str] = Field(default_factory=frozenset)
    source_path: Path | None = None
    extra: dict[str, Any] = Field(default_factory=dict)

    def to_frontmatter(self) -> dict[str, Any]:
        """Project the document back onto its front matter keys.

        Keys outside the fixed schema are carried through from ``extra``.
        """
        fm: dict[str, Any] = dict(self.extra)
        fm["title"] = self.title
        fm["date"] = self.published_date
        fm["description"] = self.description
        if self.featured_image is not None:
            fm["featuredImage"] = self.featured_image
        return fm

    def summary(self) -> dict[str, Any]:
        """JSON-friendly record handed to renderers and CLI output."""
        return {
            "identifier": self.identifier,
            "title": self.title,
            "date": self.published_date.isoformat(),
            "description": self.description,
            "featured_image": self.featured_image,
            "links": sorted(self.links),
            "path": str(self.source_path) if self.source_path is not None else None,
        }
