"""Command: compile a document with remote component and layout resolution."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from mdxe.commands._base import MdxeCommand

if TYPE_CHECKING:
    from mdxe.commands._context import AppContext


def _parse_components(values: tuple[str, ...]) -> dict[str, str]:
    components: dict[str, str] = {}
    for value in values:
        name, sep, specifier = value.partition("=")
        if not sep or not name.strip() or not specifier.strip():
            msg = f"Expected Name=specifier, got {value!r}"
            raise click.BadParameter(msg, param_hint="--component")
        components[name.strip()] = specifier.strip()
    return components


@click.command(
    "compile",
    cls=MdxeCommand,
    examples="""\
  mdxe compile docs/post.mdx
  mdxe compile docs/post --component Button=react-button
  mdxe compile post.mdx --layout @mdxui/layouts/blog --version 1.2.0
  mdxe compile post.mdx --type https://schema.org/BlogPosting
  mdxe --json compile post.mdx --output build/post.js""",
)
@click.argument("target")
@click.option(
    "--component",
    "components",
    multiple=True,
    metavar="NAME=SPEC",
    help="Extra component reference (repeatable).",
)
@click.option("--layout", default=None, help="Explicit layout specifier.")
@click.option("--type", "type_id", default=None, help="Type identifier for layout lookup.")
@click.option("--version", "version", default=None, help="Version for synthesized package URLs.")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write compiled code to this file.",
)
@click.pass_obj
def compile_cmd(
    app: AppContext,
    target: str,
    components: tuple[str, ...],
    layout: str | None,
    type_id: str | None,
    version: str | None,
    output: Path | None,
) -> None:
    """Compile an .md/.mdx document, splicing in resolved exports."""
    from mdxe.services.compile import CompileService

    app.emit(
        CompileService(app.pipeline).compile_file(
            target,
            components=_parse_components(components),
            layout=layout,
            type_id=type_id,
            version=version,
            output=output,
        )
    )
