from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from codex_highlight.engine import available_languages, available_themes

console = Console()


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def languages(
    search: Annotated[str | None, typer.Option(help="Only show languages whose name or alias contains this.")] = None,
) -> None:
    """List the languages the engine can highlight by name."""
    rows = []
    for name, aliases in available_languages():
        if search and search.lower() not in name.lower() and not any(search.lower() in a for a in aliases):
            continue
        rows.append((name, ", ".join(aliases)))
    _render_table(["name", "aliases"], rows)


def themes() -> None:
    """List the available theme names."""
    _render_table(["theme"], [(name,) for name in available_themes()])
