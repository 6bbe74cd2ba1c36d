from __future__ import annotations

from codex_highlight.core.cache import HighlighterCache, get_default_cache


async def get_cache() -> HighlighterCache:
    """Return the process-wide highlighter cache; it lives as long as the process."""
    return get_default_cache()
