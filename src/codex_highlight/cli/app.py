import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from codex_highlight.cli.catalog import languages, themes
from codex_highlight.cli.render import render
from codex_highlight.cli.serve import serve_app

app = typer.Typer(
    name="codex-highlight",
    help="Codex Highlight CLI: render source code into syntax-highlighted HTML.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log pipeline activity to stderr.")] = False,
) -> None:
    """Codex Highlight CLI: render source code into syntax-highlighted HTML."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(show_path=False)],
        )


app.command("render")(render)
app.command("languages")(languages)
app.command("themes")(themes)
app.add_typer(serve_app, name="serve")


def main() -> None:
    app()
