from pathlib import Path
from typing import Any

from codex_highlight.models import (
    LanguageName,
    LanguageSentinel,
    LanguageSpec,
    RawLanguage,
    SpecialLanguage,
    ThemeSpec,
)

_SENTINEL_ALIASES = {
    "": SpecialLanguage.PLAINTEXT,
    "plain": SpecialLanguage.PLAINTEXT,
    "plaintext": SpecialLanguage.PLAINTEXT,
    "text": SpecialLanguage.PLAINTEXT,
    "txt": SpecialLanguage.PLAINTEXT,
    "auto": SpecialLanguage.AUTO,
}

_EXTENSION_LANGUAGE_MAP = {
    ".c": "c",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cs": "csharp",
    ".css": "css",
    ".cxx": "cpp",
    ".go": "go",
    ".h": "c",
    ".hh": "cpp",
    ".hpp": "cpp",
    ".htm": "html",
    ".html": "html",
    ".java": "java",
    ".js": "javascript",
    ".json": "json",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".md": "markdown",
    ".markdown": "markdown",
    ".py": "python",
    ".rb": "ruby",
    ".rs": "rust",
    ".scss": "scss",
    ".sh": "bash",
    ".toml": "toml",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".yaml": "yaml",
    ".yml": "yaml",
}


def coerce_language(language: str | dict[str, Any] | LanguageSpec | None) -> LanguageSpec:
    """Turn a caller-supplied language value into a ``LanguageSpec``.

    ``None`` and the plain-text aliases become the plaintext sentinel, other
    strings become canonical names and dicts become raw descriptors.
    """
    if language is None:
        return LanguageSentinel(SpecialLanguage.PLAINTEXT)
    if isinstance(language, (LanguageName, LanguageSentinel, RawLanguage)):
        return language
    if isinstance(language, dict):
        return RawLanguage(dict(language))
    if isinstance(language, str):
        normalized = language.strip().lower()
        if normalized in _SENTINEL_ALIASES:
            return LanguageSentinel(_SENTINEL_ALIASES[normalized])
        return LanguageName(normalized)
    raise TypeError(f"Unsupported language value: {language!r}")


def coerce_theme(theme: ThemeSpec | None, default: str) -> ThemeSpec:
    if theme is None:
        return default
    if isinstance(theme, str):
        return theme.strip() or default
    if isinstance(theme, dict):
        return dict(theme)
    raise TypeError(f"Unsupported theme value: {theme!r}")


def detect_language_from_path(file_path: Path) -> LanguageSpec:
    """Guess the language from a file extension, falling back to plain text."""
    suffix = file_path.suffix.lower()
    if suffix in _EXTENSION_LANGUAGE_MAP:
        return LanguageName(_EXTENSION_LANGUAGE_MAP[suffix])
    return LanguageSentinel(SpecialLanguage.PLAINTEXT)
