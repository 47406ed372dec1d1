"""Command: show one document with its links."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubctl.commands._base import PubCommand

if TYPE_CHECKING:
    from pubctl.commands._context import AppContext


@click.command(
    cls=PubCommand,
    examples="""\
  pubctl show outbox-pattern
  pubctl show design-patterns/repository-pattern
  pubctl --json show outbox-pattern""",
)
@click.argument("identifier")
@click.pass_obj
def show(app: AppContext, identifier: str) -> None:
    """Show metadata, outgoing links and backlinks for IDENTIFIER."""
    from pubctl.services.build import BuildService

    app.emit(BuildService(app.site).show(identifier))
