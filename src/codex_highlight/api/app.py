from __future__ import annotations

from fastapi import FastAPI

from codex_highlight.api.routes.health import router as health_router
from codex_highlight.api.routes.render import router as render_router
from codex_highlight.api.routes.root import router as root_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Codex Highlight API",
        description="Render source code into syntax-highlighted HTML fragments.",
        version="0.1.0",
    )

    app.include_router(root_router, include_in_schema=False)
    app.include_router(health_router, include_in_schema=False)
    app.include_router(render_router)

    return app
