"""Command: run a full publish cycle."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from pubctl.commands._base import PubCommand

if TYPE_CHECKING:
    from pubctl.commands._context import AppContext


@click.command(
    cls=PubCommand,
    examples="""\
  pubctl build
  pubctl build --strict-links
  pubctl build --output dist --workers 4
  pubctl --json build""",
)
@click.option(
    "--strict-links/--no-strict-links",
    default=None,
    help="Fail the build on broken internal links (default from config).",
)
@click.option(
    "--strict-assets/--no-strict-assets",
    default=None,
    help="Fail the build on missing featured images (default from config).",
)
@click.option(
    "-o",
    "--output",
    "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Override the output directory.",
)
@click.option("--workers", type=click.IntRange(min=1), default=None, help="Parallel parse workers.")
@click.pass_obj
def build(
    app: AppContext,
    strict_links: bool | None,
    strict_assets: bool | None,
    output_dir: Path | None,
    workers: int | None,
) -> None:
    """Validate every document and publish the set."""
    from pubctl.services.build import BuildService

    app.emit(
        BuildService(app.site).build(
            strict_links=strict_links,
            strict_assets=strict_assets,
            workers=workers,
            output_dir=output_dir,
        )
    )
