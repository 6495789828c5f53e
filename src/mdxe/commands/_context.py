"""AppContext — shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy pipeline initialization and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from mdxe.output.formatters import format_result

if TYPE_CHECKING:
    from mdxe.config.settings import MdxeSettings
    from mdxe.services.pipeline import CompilationPipeline
    from mdxe.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The pipeline is created lazily on first use so ``--help`` and
    ``--version`` never build an HTTP session or thread pool.
    """

    def __init__(self, settings: MdxeSettings) -> None:
        self.settings = settings
        self._pipeline: CompilationPipeline | None = None

        from mdxe.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def pipeline(self) -> CompilationPipeline:
        """The compilation pipeline (created lazily on first access)."""
        if self._pipeline is None:
            from mdxe.services.pipeline import CompilationPipeline

            self._pipeline = CompilationPipeline.from_config(self.settings.to_config())
            click.get_current_context().call_on_close(self._pipeline.close)
        return self._pipeline

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            verbose=self.settings.verbose,
        )
        if result.ok:
            click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
