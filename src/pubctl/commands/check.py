"""Command: validate the content tree without publishing."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from pubctl.commands._base import PubCommand

if TYPE_CHECKING:
    from pubctl.commands._context import AppContext


@click.command(
    cls=PubCommand,
    examples="""\
  pubctl check
  pubctl check --strict-links
  pubctl -q check""",
)
@click.option(
    "--strict-links/--no-strict-links",
    default=None,
    help="Treat broken links as errors.",
)
@click.option(
    "--strict-assets/--no-strict-assets",
    default=None,
    help="Treat missing featured images as errors.",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Parallel parse workers.")
@click.pass_obj
def check(
    app: AppContext,
    strict_links: bool | None,
    strict_assets: bool | None,
    workers: int | None,
) -> None:
    """Run every validation phase; publish nothing."""
    from pubctl.services.build import BuildService

    app.emit(
        BuildService(app.site).check(
            strict_links=strict_links,
            strict_assets=strict_assets,
            workers=workers,
        )
    )
