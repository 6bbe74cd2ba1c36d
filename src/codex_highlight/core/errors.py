from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codex_highlight.models import LanguageSpec, ThemeSpec


class HighlightError(Exception):
    """Base class for the errors the highlighting pipeline models."""


class GrammarLoadError(HighlightError):
    """An externally referenced grammar file could not be read or parsed."""

    def __init__(self, path: Path, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to load grammar file {path}: {cause}")


class HighlighterInitError(HighlightError):
    """The engine rejected the requested language/theme registration."""

    def __init__(
        self,
        languages: Sequence[LanguageSpec],
        themes: Sequence[ThemeSpec],
        cause: BaseException,
    ) -> None:
        self.languages = list(languages)
        self.themes = list(themes)
        self.cause = cause
        super().__init__(f"Failed to create highlighter: {cause}")


class EngineError(Exception):
    """Raised by an engine adapter when it cannot register or tokenize a language or theme."""


class GrammarError(EngineError):
    pass


class ThemeError(EngineError):
    pass


class RenderError(HighlightError):
    """A constructed highlighter failed while tokenizing the input."""

    def __init__(self, language: str, theme: str, cause: BaseException) -> None:
        self.language = language
        self.theme = theme
        self.cause = cause
        super().__init__(f"Failed to highlight {language} code: {cause}")
