"""Subcommand modules for pubctl.

Provides register_commands() which uses deferred imports to keep
``pubctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from pubctl.commands.build import build
    from pubctl.commands.check import check
    from pubctl.commands.list_cmd import list_cmd
    from pubctl.commands.show import show

    cli.add_command(build)
    cli.add_command(check)
    cli.add_command(list_cmd)
    cli.add_command(show)
