"""Shared fixtures and helpers for tests."""

import threading
import time
from collections.abc import Sequence
from pathlib import Path

import pytest

from codex_highlight.core.cache import HighlighterCache
from codex_highlight.core.errors import GrammarError
from codex_highlight.engine import PygmentsEngine
from codex_highlight.models import LanguageName, LanguageSpec, RootNode, ThemeSpec

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Fake engine for cache tests
# ---------------------------------------------------------------------------


class FakeHighlighter:
    def __init__(self, languages: Sequence[LanguageSpec], themes: Sequence[ThemeSpec]) -> None:
        self.languages = list(languages)
        self.themes = list(themes)

    def highlight(self, code: str, *, language: str, theme: str, hooks: Sequence[object] = ()) -> RootNode:
        return RootNode()


class CountingEngine:
    """Records constructions; can be slowed down, gated or made to fail."""

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.calls = 0
        self.fail = False
        self.gate = threading.Event()
        self.gated_language = LanguageName("slow")
        self._lock = threading.Lock()

    def create_highlighter(self, languages: Sequence[LanguageSpec], themes: Sequence[ThemeSpec]) -> FakeHighlighter:
        with self._lock:
            self.calls += 1
        if self.gated_language in languages:
            self.gate.wait(timeout=5)
        if self.delay:
            time.sleep(self.delay)
        if self.fail:
            raise GrammarError("rejected grammar")
        return FakeHighlighter(languages, themes)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _default_theme_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CODEX_HIGHLIGHT_THEME", raising=False)


@pytest.fixture
def counting_engine() -> CountingEngine:
    return CountingEngine()


@pytest.fixture
def fake_cache(counting_engine: CountingEngine) -> HighlighterCache:
    return HighlighterCache(counting_engine)


@pytest.fixture
def cache() -> HighlighterCache:
    """A fresh cache backed by the real Pygments engine."""
    return HighlighterCache(PygmentsEngine())


@pytest.fixture
def mini_grammar() -> dict[str, object]:
    """A small grammar descriptor with comments, numbers and strings."""
    return {
        "name": "mini",
        "patterns": [
            {"match": "#.*$", "name": "comment.line"},
            {"match": "\\d+", "name": "constant.numeric"},
            {"begin": '"', "end": '"', "name": "string.quoted.double"},
        ],
    }
