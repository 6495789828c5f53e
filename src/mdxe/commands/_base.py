"""MdxeCommand — click command class carrying an ``--examples`` flag.

``mdxe compile --examples`` prints sample invocations and exits before
argument validation, so ``--help`` can stay short.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesOption(click.Option):
    """Eager flag that echoes a fixed block of example invocations."""

    def __init__(self, examples: str) -> None:
        super().__init__(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=self._show,
            help="Show usage examples.",
        )
        self.examples = examples

    def _show(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n")
            click.echo(self.examples)
            ctx.exit(0)


class MdxeCommand(click.Command):
    """Command class used by every mdxe subcommand."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(ExamplesOption(examples))
