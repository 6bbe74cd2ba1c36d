from fastapi import APIRouter, Depends

from codex_highlight.api.dependencies import get_cache
from codex_highlight.api.schemas import HealthResponse, LivenessResponse
from codex_highlight.core.cache import HighlighterCache

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(cache: HighlighterCache = Depends(get_cache)) -> HealthResponse:
    """Report how many highlighter instances the process-wide cache holds."""
    return HealthResponse(highlighters=len(cache))


@router.get("/healthz/live", response_model=LivenessResponse)
async def liveness() -> LivenessResponse:
    """The event loop is answering; no highlighter is built or consulted."""
    return LivenessResponse()
