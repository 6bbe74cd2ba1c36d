from collections.abc import Sequence
from typing import Any

from codex_highlight.core.cache import HighlighterCache, get_default_cache
from codex_highlight.core.config import get_default_theme
from codex_highlight.core.descriptors import language_id, normalize_language
from codex_highlight.core.errors import EngineError, RenderError
from codex_highlight.core.languages import coerce_language, coerce_theme
from codex_highlight.core.ports.engine import MarkupHooks
from codex_highlight.core.transforms import CodeTransformer
from codex_highlight.engine.markup import to_html
from codex_highlight.models import CodeInput, LanguageSpec, ThemeSpec, WrapMode, theme_name


async def render(code_input: CodeInput, cache: HighlighterCache | None = None) -> str:
    """Highlight ``code_input`` and return the HTML fragment.

    Normalization and acquisition errors propagate unchanged; an engine
    failure during tokenization is raised as ``RenderError``.
    """
    if cache is None:
        cache = get_default_cache()

    language = await normalize_language(code_input.language)
    resolved_language = language_id(language)
    highlighter = await cache.acquire([language], [code_input.theme])

    resolved_theme = theme_name(code_input.theme)
    transformer = CodeTransformer(
        inline=code_input.inline,
        wrap=code_input.wrap,
        theme=resolved_theme,
        language=resolved_language,
    )
    try:
        tree = highlighter.highlight(
            code_input.code,
            language=resolved_language,
            theme=resolved_theme,
            hooks=[transformer, *code_input.transformers],
        )
    except EngineError as exc:
        raise RenderError(resolved_language, resolved_theme, exc) from exc
    return to_html(tree)


async def render_code(
    code: str,
    language: str | dict[str, Any] | LanguageSpec | None = None,
    theme: ThemeSpec | None = None,
    wrap: WrapMode = WrapMode.NO_WRAP,
    inline: bool = False,
    transformers: Sequence[MarkupHooks] = (),
    cache: HighlighterCache | None = None,
) -> str:
    """Entry point for hosts: plain values in, HTML fragment out."""
    code_input = CodeInput(
        code=code,
        language=coerce_language(language),
        theme=coerce_theme(theme, get_default_theme()),
        wrap=wrap,
        inline=inline,
        transformers=tuple(transformers),
    )
    return await render(code_input, cache)
