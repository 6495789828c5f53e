"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output, colors) or
machines (--json). Renderers are dispatched by ``result.op``; unknown
ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.syntax import Syntax
from rich.text import Text

from mdxe.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from mdxe.services.result import ServiceResult


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: If True, return JSON; otherwise return human-readable text.
        verbose: Include error detail in human-readable failures.
    """
    if json_output:
        return result.model_dump_json(indent=2)

    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "mdxe.ok"), (f"  {result.op}", "mdxe.op")))


def _field(console: Console, key: str, value: Any, style: str = "") -> None:
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"), default=str)
    console.print(Text.assemble((f"  {key}: ", "mdxe.key"), (str(value), style)))


# ── Renderers ─────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "mdxe.error"), (f"  {result.op}", "mdxe.op"), " — ", msg)
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(Text(f"    {k}: {v}"))


def _render_compile(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    data = result.data
    _field(console, "path", data.get("path", ""), "mdxe.path")
    if "output" in data:
        _field(console, "output", data["output"], "mdxe.path")
    for key in ("plain_metadata", "linked_metadata", "page_metadata"):
        if data.get(key):
            _field(console, key, data[key])
    if "code" in data:
        console.print()
        console.print(Syntax(data["code"], "jsx", theme="ansi_dark", word_wrap=True))


def _render_resolve(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    kind = str(result.data.get("kind", ""))
    _field(console, "specifier", result.data.get("specifier", ""))
    _field(console, "url", result.data.get("url", ""), "mdxe.url")
    _field(console, "kind", kind, f"mdxe.kind.{kind}" if kind else "")


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "compile": _render_compile,
    "resolve": _render_resolve,
}
