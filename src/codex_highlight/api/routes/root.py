from __future__ import annotations

from typing import Any

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root discovery endpoint: API directory for programmatic and human clients."""
    return {
        "meta": {
            "title": "Codex Highlight API",
            "description": "Render source code into syntax-highlighted HTML fragments.",
            "version": "0.1.0",
        },
        "links": {
            "self": "/",
            "render": "/render",
            "health": "/health",
            "openapi": "/openapi.json",
            "docs": "/docs",
        },
    }
