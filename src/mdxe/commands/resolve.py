"""Command: show the URL and kind a specifier resolves to."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mdxe.commands._base import MdxeCommand

if TYPE_CHECKING:
    from mdxe.commands._context import AppContext


@click.command(
    cls=MdxeCommand,
    examples="""\
  mdxe resolve react --version 18.2.0
  mdxe resolve @mdx-js/react
  mdxe resolve https://schema.org/BlogPosting --context https://mdx.org.ai/docs""",
)
@click.argument("specifier")
@click.option("--version", "version", default=None, help="Package version.")
@click.option("--context", default=None, help="Context (namespace) identifier.")
@click.pass_obj
def resolve(app: AppContext, specifier: str, version: str | None, context: str | None) -> None:
    """Resolve a specifier without fetching it."""
    from mdxe.services.resolve import ResolveService

    app.emit(ResolveService(app.pipeline).resolve(specifier, version=version, context=context))
