import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from codex_highlight.core.errors import HighlightError
from codex_highlight.core.languages import detect_language_from_path
from codex_highlight.core.render import render_code
from codex_highlight.models import LanguageSpec, WrapMode

console = Console(stderr=True)


def render(
    path: Annotated[Path | None, typer.Argument(help="Path to a source file.")] = None,
    code: Annotated[str | None, typer.Option(help="Source code string to render instead of a file.")] = None,
    language: Annotated[
        str | None, typer.Option("--language", "-l", help="Language name (e.g. python, js, plaintext, auto).")
    ] = None,
    theme: Annotated[str | None, typer.Option("--theme", "-t", help="Theme name (e.g. github-dark, css-variables).")] = None,
    wrap: Annotated[WrapMode, typer.Option(help="Line wrapping style of the block container.")] = WrapMode.NO_WRAP,
    inline: Annotated[bool, typer.Option(help="Render as inline <code> instead of a <pre> block.")] = False,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write HTML to this file.")] = None,
) -> None:
    """Render a file or code snippet as highlighted HTML."""
    if code is None and path is None:
        console.print("[red]Provide a PATH or --code.[/red]")
        raise typer.Exit(code=2)

    resolved_language: str | LanguageSpec | None = language
    if code is None:
        assert path is not None
        try:
            code = path.read_text(encoding="utf-8")
        except OSError as exc:
            console.print(f"[red]Cannot read {path}:[/red] {escape(str(exc))}")
            raise typer.Exit(code=1) from None
        if language is None:
            resolved_language = detect_language_from_path(path)

    try:
        html = asyncio.run(render_code(code, language=resolved_language, theme=theme, wrap=wrap, inline=inline))
    except HighlightError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from None

    if output is None:
        typer.echo(html)
        return
    output.write_text(html, encoding="utf-8")
    console.print(f"[green]Wrote[/green] {output}")
