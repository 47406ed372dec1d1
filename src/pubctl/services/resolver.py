"""Cross-reference resolution — find internal links with no target.

Runs only after the registry is complete and frozen, because links may
point forwards or backwards in publish order. Broken links are reported,
not raised; :func:`enforce_link_policy` turns a report into a
:class:`~pubctl.domain.errors.BrokenLinkError` when strict links are on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from pubctl.domain.errors import BrokenLinkError
from pubctl.infrastructure.graph import LinkGraph

if TYPE_CHECKING:
    from pubctl.infrastructure.registry import Registry

logger = logging.getLogger(__name__)


class LinkReport(BaseModel):
    """Outcome of resolving every internal link in a registry.

    ``broken`` maps a source identifier to the targets it links to that
    are not registered. Sources whose links all resolve are absent.
    """

    model_config = {"frozen": True}

    broken: dict[str, frozenset[str]] = Field(default_factory=dict)
    orphans: list[str] = Field(default_factory=list)
    backlinks: dict[str, int] = Field(default_factory=dict)
    links_checked: int = 0

    @property
    def broken_count(self) -> int:
        return sum(len(targets) for targets in self.broken.values())

    @property
    def ok(self) -> bool:
        return not self.broken

    def broken_for(self, identifier: str) -> frozenset[str]:
        return self.broken.get(identifier, frozenset())

    def as_sorted_dict(self) -> dict[str, list[str]]:
        """JSON-friendly ``broken`` mapping with deterministic ordering."""
        return {source: sorted(targets) for source, targets in sorted(self.broken.items())}


def resolve_links(registry: Registry) -> LinkReport:
    """Check every internal link of every registered document."""
    graph = LinkGraph(registry)
    broken = graph.broken_links()
    backlinks = {
        doc.identifier: len(graph.backlinks(doc.identifier)) for doc in registry.all()
    }
    report = LinkReport(
        broken={source: frozenset(targets) for source, targets in broken.items()},
        orphans=graph.orphans(),
        backlinks=backlinks,
        links_checked=sum(len(doc.links) for doc in registry.all()),
    )
    if broken:
        logger.debug("Broken links: %s", report.as_sorted_dict())
    return report


def enforce_link_policy(report: LinkReport, *, strict: bool) -> None:
    """Raise :class:`BrokenLinkError` for a report with broken links under *strict*."""
    if strict and not report.ok:
        raise BrokenLinkError({source: set(targets) for source, targets in report.broken.items()})
