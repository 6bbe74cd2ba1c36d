import typer
from rich.console import Console

from codex_highlight.core.config import get_api_host, get_api_port

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("api")
def api(
    host: str | None = None,
    port: int | None = None,
) -> None:
    """Start the FastAPI render server."""
    import uvicorn

    from codex_highlight.api.app import create_app

    host = host or get_api_host()
    port = port or get_api_port()
    app = create_app()
    console.print(f"[green]Starting API server on {host}:{port}[/green]")
    uvicorn.run(app, host=host, port=port)
