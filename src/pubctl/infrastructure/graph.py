"""LinkGraph — NetworkX view of internal links across a registry.

Built per cycle from a frozen registry, never cached across cycles.
Nodes are registered identifiers (``registered=True``) plus any link
targets that are not registered (``registered=False``); edges run from a
source document to each identifier its body links to.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from pubctl.infrastructure.registry import Registry

type _Graph = nx.DiGraph


class LinkGraph:
    """Directed link graph over one registry."""

    def __init__(self, registry: Registry) -> None:
        self._registry = registry
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building it on first access."""
        if self._graph is None:
            self._graph = self._build()
        return self._graph

    def _build(self) -> _Graph:
        """Add every document first so isolated documents appear as nodes."""
        g: _Graph = nx.DiGraph()
        for doc in self._registry.all():
            g.add_node(doc.identifier, registered=True, title=doc.title)
        for doc in self._registry.all():
            for target in sorted(doc.links):
                if target not in g:
                    g.add_node(target, registered=False)
                g.add_edge(doc.identifier, target)
        return g

    def broken_links(self) -> dict[str, set[str]]:
        """Map each source identifier to its link targets that are not registered."""
        g = self.graph
        broken: dict[str, set[str]] = {}
        for source, target in g.edges():
            if not g.nodes[target].get("registered", False):
                broken.setdefault(source, set()).add(target)
        return broken

    def backlinks(self, identifier: str) -> list[str]:
        """Registered documents linking to *identifier*, sorted."""
        g = self.graph
        if identifier not in g:
            return []
        return sorted(g.predecessors(identifier))

    def orphans(self) -> list[str]:
        """Registered documents with no inbound internal link, sorted."""
        g = self.graph
        return sorted(
            node
            for node, data in g.nodes(data=True)
            if data.get("registered", False) and g.in_degree(node) == 0
        )
