"""Built-in manifest renderer.

Writes ``manifest.json`` into the publish output directory: one record per
document, in publish order. Downstream site generators read the manifest
instead of re-walking and re-validating the content tree.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from pubctl.domain.document import Document

hookimpl = pluggy.HookimplMarker("pubctl")

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"


class ManifestPlugin:
    """Emit the ordered document set as a JSON manifest."""

    def __init__(self, *, site_root: Path | None = None) -> None:
        self._site_root = site_root

    def _record(self, doc: Document) -> dict[str, object]:
        record = doc.summary()
        if doc.source_path is not None and self._site_root is not None:
            try:
                record["path"] = doc.source_path.relative_to(self._site_root).as_posix()
            except ValueError:
                pass  # content root outside the site root: keep the absolute path
        return record

    @hookimpl
    def publish_documents(
        self,
        documents: tuple[Document, ...],
        output_dir: Path,
    ) -> list[str]:
        output_dir.mkdir(parents=True, exist_ok=True)
        payload = {
            "count": len(documents),
            "documents": [self._record(doc) for doc in documents],
        }
        target = output_dir / MANIFEST_FILENAME
        tmp = target.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        tmp.replace(target)
        logger.debug("Wrote %s (%d documents)", target, len(documents))
        return [MANIFEST_FILENAME]
