"""Pluggy hook specifications for pubctl.

``publish_documents`` is how the Publisher hands the ordered document set
to rendering collaborators. ``post_build`` is a notification fired once a
cycle reaches a terminal state.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

if TYPE_CHECKING:
    from pubctl.domain.document import Document

hookspec = pluggy.HookspecMarker("pubctl")


class PubctlHookSpec:
    """Hook specifications for the pubctl plugin system."""

    @hookspec
    def publish_documents(
        self,
        documents: tuple[Document, ...],
        output_dir: Path,
    ) -> list[str] | None:
        """Render the ordered, validated documents.

        Return the paths written (relative to *output_dir*), or None.
        Documents must be treated as read-only.
        """

    @hookspec
    def post_build(
        self,
        ok: bool,
        state: str,
        published: int,
        report: dict[str, Any],
    ) -> None:
        """Called after a publish cycle reaches ``done`` or ``failed``."""
