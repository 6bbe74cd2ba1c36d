from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from collections.abc import Sequence
from typing import Any

from codex_highlight.core.errors import EngineError, HighlighterInitError
from codex_highlight.core.ports.engine import HighlightEngine, Highlighter
from codex_highlight.models import LanguageName, LanguageSentinel, LanguageSpec, RawLanguage, ThemeSpec

logger = logging.getLogger(__name__)


def _language_token(spec: LanguageSpec) -> dict[str, Any]:
    if isinstance(spec, LanguageName):
        return {"name": spec.name}
    if isinstance(spec, LanguageSentinel):
        return {"sentinel": spec.kind.value}
    if isinstance(spec, RawLanguage):
        return {"descriptor": spec.descriptor}
    raise TypeError(f"Unsupported language spec: {spec!r}")


def _canonical(value: Any) -> str:
    return json.dumps(value, sort_keys=True, separators=(",", ":"), default=str)


def compute_highlighter_key(languages: Sequence[LanguageSpec], themes: Sequence[ThemeSpec]) -> str:
    """Hash the full structure of both spec sets, independent of order and duplicates."""
    language_parts = sorted({_canonical(_language_token(lang)) for lang in languages})
    theme_parts = sorted({_canonical(theme) for theme in themes})
    h = hashlib.sha256()
    for part in language_parts:
        h.update(b"L|" + part.encode("utf-8"))
    for part in theme_parts:
        h.update(b"|T|" + part.encode("utf-8"))
    return h.hexdigest()


def _retrieve_exception(task: asyncio.Task[Highlighter]) -> None:
    # Every waiter may have been cancelled; the failure is already logged in _construct.
    if not task.cancelled():
        task.exception()


class HighlighterCache:
    """Lazily construct and share highlighter instances per (languages, themes) set.

    Each distinct key is constructed at most once; callers arriving while a
    construction is in flight await the same pending task. Registered sets are
    never extended on an existing instance.
    """

    def __init__(self, engine: HighlightEngine | None = None) -> None:
        if engine is None:
            from codex_highlight.engine import PygmentsEngine

            engine = PygmentsEngine()
        self._engine = engine
        self._instances: dict[str, Highlighter] = {}
        self._pending: dict[str, asyncio.Task[Highlighter]] = {}

    def __len__(self) -> int:
        return len(self._instances)

    def __contains__(self, key: object) -> bool:
        return key in self._instances

    async def acquire(self, languages: Sequence[LanguageSpec], themes: Sequence[ThemeSpec]) -> Highlighter:
        key = compute_highlighter_key(languages, themes)
        instance = self._instances.get(key)
        if instance is not None:
            logger.debug("Highlighter cache hit for %s", key[:12])
            return instance

        task = self._pending.get(key)
        if task is None or task.get_loop() is not asyncio.get_running_loop():
            logger.debug("Highlighter cache miss for %s", key[:12])
            task = asyncio.create_task(self._construct(key, list(languages), list(themes)))
            task.add_done_callback(_retrieve_exception)
            self._pending[key] = task

        # Shielded so an abandoned caller does not cancel a construction others share.
        return await asyncio.shield(task)

    async def _construct(
        self,
        key: str,
        languages: list[LanguageSpec],
        themes: list[ThemeSpec],
    ) -> Highlighter:
        try:
            instance = await asyncio.to_thread(self._engine.create_highlighter, languages, themes)
        except EngineError as exc:
            logger.warning("Highlighter construction failed for %s: %s", key[:12], exc)
            raise HighlighterInitError(languages, themes, exc) from exc
        finally:
            if self._pending.get(key) is asyncio.current_task():
                del self._pending[key]

        self._instances[key] = instance
        logger.debug("Constructed highlighter %s (%d languages, %d themes)", key[:12], len(languages), len(themes))
        return instance

    def clear(self) -> None:
        """Drop every cached instance; in-flight constructions still complete."""
        self._instances.clear()


_default_cache: HighlighterCache | None = None


def get_default_cache() -> HighlighterCache:
    """Return the process-wide cache, creating it on first use."""
    global _default_cache  # noqa: PLW0603
    if _default_cache is None:
        _default_cache = HighlighterCache()
    return _default_cache
