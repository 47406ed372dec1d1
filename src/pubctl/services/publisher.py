"""Publisher — order the validated set and hand it to renderers.

Order is ``published_date`` descending (most recent first), ties broken by
identifier ascending, so the same tree always publishes in the same order.
Documents are passed through untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pubctl.domain.errors import RenderError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from pubctl.domain.document import Document
    from pubctl.infrastructure.registry import Registry
    from pubctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


def order_documents(documents: Iterable[Document]) -> tuple[Document, ...]:
    """Sort by date descending, then identifier ascending."""
    by_identifier = sorted(documents, key=lambda d: d.identifier)
    return tuple(sorted(by_identifier, key=lambda d: d.published_date, reverse=True))


@dataclass(frozen=True)
class PublishOutcome:
    """What the publisher emitted and what the renderers wrote."""

    documents: tuple[Document, ...]
    outputs: list[str] = field(default_factory=list)


class Publisher:
    """Emits an ordered registry to every ``publish_documents`` plugin."""

    def __init__(self, plugins: PluginManager, output_dir: Path) -> None:
        self._plugins = plugins
        self._output_dir = output_dir

    def order(self, registry: Registry) -> tuple[Document, ...]:
        return order_documents(registry.all())

    def publish(self, registry: Registry) -> PublishOutcome:
        """Order *registry* and pass the sequence to the renderers.

        Raises:
            RenderError: If any renderer raises. The cycle treats this as a
                failed publish; nothing is reported as published.
        """
        documents = self.order(registry)
        try:
            results = self._plugins.hook.publish_documents(
                documents=documents,
                output_dir=self._output_dir,
            )
        except Exception as exc:
            msg = f"Renderer failed: {exc}"
            raise RenderError(msg) from exc

        outputs: list[str] = []
        for written in results:
            if written:
                outputs.extend(str(p) for p in written)
        logger.debug("Published %d documents, %d outputs", len(documents), len(outputs))
        return PublishOutcome(documents=documents, outputs=sorted(outputs))
