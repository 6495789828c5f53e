"""Entry point for the ``mdxe`` console script.

Global flags are read once here into :class:`MdxeSettings`; subcommands
receive them through :class:`AppContext` on ``ctx.obj``.
"""

from __future__ import annotations

import click

from mdxe import __version__
from mdxe.commands import register_commands
from mdxe.commands._context import AppContext
from mdxe.config.settings import MdxeSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="mdxe")
@click.option("--json", "json_output", is_flag=True, help="Print results as JSON.")
@click.option("-v", "--verbose", is_flag=True, help="Show full payloads and cache activity.")
@click.option("--log-json", is_flag=True, help="Write log records to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Use this mdxe.toml instead of searching upward from the cwd.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """mdxe — compile MDX with remote components and layouts."""
    ctx.obj = AppContext(
        MdxeSettings.from_cli(
            config_path=config_path,
            json_output=json_output,
            verbose=verbose,
            log_json=log_json,
        )
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
