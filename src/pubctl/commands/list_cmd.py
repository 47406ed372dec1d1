"""Command: list documents in publish order."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubctl.commands._base import PubCommand

if TYPE_CHECKING:
    from pubctl.commands._context import AppContext


@click.command(
    "list",
    cls=PubCommand,
    examples="""\
  pubctl list
  pubctl -q list
  pubctl --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List documents, newest first."""
    from pubctl.services.build import BuildService

    app.emit(BuildService(app.site).list_documents())
