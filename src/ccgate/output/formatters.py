"""Rich/JSON output for ServiceResult.

Three modes: JSON (``--json``) dumps the result model, quiet (``-q``)
prints the bare minimum, and the default renders for humans via Rich.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel
from rich.table import Table
from rich.text import Text

from ccgate.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from ccgate.services.result import ServiceResult


class OutputSettings(BaseModel):
    """Output mode flags taken from the CLI settings."""

    model_config = {"frozen": True}

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display."""
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _render_quiet(result)
    return _render_human(result, verbose=settings.verbose)


def _error_line(result: ServiceResult) -> str:
    msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op} — {msg}"


def _render_quiet(result: ServiceResult) -> str:
    if not result.ok:
        return _error_line(result)
    if result.op == "list_rules":
        return "\n".join(item["domain"] for item in result.data.get("items", []))
    return f"OK: {result.op}"


def _render_human(result: ServiceResult, *, verbose: bool) -> str:
    if not result.ok:
        line = _error_line(result)
        if verbose and result.error and result.error.detail:
            line += "\n" + "\n".join(
                f"  {k}: {v}" for k, v in result.error.detail.items()
            )
        return line

    console = create_console()
    console.print(Text("OK", style="cc.ok"), Text(f"  {result.op}", style="cc.op"))
    if result.op == "list_rules":
        _render_rules(console, result.data.get("items", []))
    else:
        for key, value in result.data.items():
            _field(console, key, value)
    return get_output(console).rstrip("\n")


def _render_rules(console: Console, items: list[dict[str, Any]]) -> None:
    if not items:
        console.print("  No domain rules set.", style="cc.key")
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Domain", style="cc.domain")
    table.add_column("Required admin", style="cc.email")
    for item in items:
        table.add_row(f"@{item['domain']}", item["admin_email"])
    console.print(table)


def _field(console: Console, key: str, value: Any) -> None:
    if value is None:
        return
    k = Text(f"  {key}: ", style="cc.key")
    if key == "domain":
        v = Text(f"@{value}", style="cc.domain")
    elif key.endswith("admin") or key.endswith("email"):
        v = Text(str(value), style="cc.email")
    else:
        v = Text(str(value))
    console.print(k, v, sep="")
