"""Subcommand modules for mdxe.

Provides register_commands() which uses deferred imports to keep
``mdxe --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from mdxe.commands.compile import compile_cmd
    from mdxe.commands.resolve import resolve

    cli.add_command(compile_cmd)
    cli.add_command(resolve)
