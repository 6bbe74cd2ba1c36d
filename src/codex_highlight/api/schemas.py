from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from codex_highlight.models import WrapMode


class RenderRequest(BaseModel):
    """POST /render: code plus presentation options."""

    code: str
    language: str | dict[str, Any] | None = None
    theme: str | dict[str, Any] | None = None
    wrap: WrapMode = WrapMode.NO_WRAP
    inline: bool = False


class RenderResponse(BaseModel):
    html: str


class LivenessResponse(BaseModel):
    status: str = "ok"


class HealthResponse(LivenessResponse):
    highlighters: int = 0
