from fastapi import APIRouter, Depends, HTTPException

from codex_highlight.api.dependencies import get_cache
from codex_highlight.api.schemas import RenderRequest, RenderResponse
from codex_highlight.core.cache import HighlighterCache
from codex_highlight.core.descriptors import is_bundled_grammar
from codex_highlight.core.errors import GrammarLoadError, HighlightError
from codex_highlight.core.render import render_code

router = APIRouter(prefix="/render", tags=["render"])


@router.post("", response_model=RenderResponse)
async def render(
    body: RenderRequest,
    cache: HighlighterCache = Depends(get_cache),
) -> RenderResponse:
    # Remote callers may only reference grammars shipped with the package.
    if isinstance(body.language, dict) and "path" in body.language:
        if not is_bundled_grammar(body.language["path"]):
            raise HTTPException(status_code=422, detail="Grammar 'path' must name a bundled grammar file")

    try:
        html = await render_code(
            body.code,
            language=body.language,
            theme=body.theme,
            wrap=body.wrap,
            inline=body.inline,
            cache=cache,
        )
    except GrammarLoadError as exc:
        raise HTTPException(status_code=422, detail=f"Failed to load grammar file '{exc.path.name}'") from exc
    except HighlightError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return RenderResponse(html=html)
