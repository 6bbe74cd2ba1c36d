from __future__ import annotations

import re
from typing import Any

from pygments.style import Style
from pygments.styles import get_all_styles, get_style_by_name
from pygments.token import (
    Comment,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Token,
)
from pygments.util import ClassNotFound

from codex_highlight.core.errors import ThemeError
from codex_highlight.engine.grammars import token_for_scope
from codex_highlight.models import ThemeSpec


class CssVariablesStyle(Style):
    """Colours are fixed placeholders, swapped for CSS custom properties after rendering."""

    name = "css-variables"
    background_color = "#000002"
    styles = {
        Token: "#000001",
        Comment: "#000006",
        Keyword: "#000007",
        Keyword.Constant: "#000004",
        Name.Constant: "#000004",
        Name.Variable: "#000008",
        Name.Function: "#000009",
        Name.Label: "#000012",
        Number: "#000004",
        String: "#000005",
        String.Interpol: "#000010",
        Operator: "#000011",
        Punctuation: "#000011",
    }


_BUILTIN_STYLES: dict[str, type[Style]] = {
    "css-variables": CssVariablesStyle,
}

_HEX_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3,4}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


def available_themes() -> list[str]:
    return sorted({*get_all_styles(), *_BUILTIN_STYLES})


def _color(value: Any, theme: str) -> str:
    if not isinstance(value, str) or not _HEX_COLOR_RE.match(value):
        raise ThemeError(f"Theme '{theme}': invalid colour {value!r}")
    digits = value[1:].lower()
    # Pygments has no alpha channel.
    if len(digits) == 4:
        digits = digits[:3]
    elif len(digits) == 8:
        digits = digits[:6]
    return f"#{digits}"


def _style_definition(settings: dict[str, Any], theme: str) -> str:
    parts: list[str] = []
    font_style = settings.get("fontStyle") or ""
    if not isinstance(font_style, str):
        raise ThemeError(f"Theme '{theme}': 'fontStyle' must be a string, got {font_style!r}")
    for word in ("italic", "bold", "underline"):
        if word in font_style.split():
            parts.append(word)
    if settings.get("foreground"):
        parts.append(_color(settings["foreground"], theme))
    if settings.get("background"):
        parts.append("bg:" + _color(settings["background"], theme))
    return " ".join(parts)


def style_from_theme(theme: dict[str, Any]) -> type[Style]:
    """Build a Pygments style from a TextMate/VS Code theme object."""
    name = theme.get("name")
    if not isinstance(name, str) or not name:
        raise ThemeError("Theme object has no 'name'")

    colors = theme.get("colors") or {}
    if not isinstance(colors, dict):
        raise ThemeError(f"Theme '{name}': 'colors' must be an object")
    background = theme.get("bg") or colors.get("editor.background")
    foreground = theme.get("fg") or colors.get("editor.foreground")

    styles: dict[Any, str] = {}
    if foreground:
        styles[Token] = _color(foreground, name)

    entries = theme.get("tokenColors") or theme.get("settings") or []
    if not isinstance(entries, list):
        raise ThemeError(f"Theme '{name}': 'tokenColors' must be a list")
    for entry in entries:
        if not isinstance(entry, dict):
            raise ThemeError(f"Theme '{name}': token colour entry must be an object")
        settings = entry.get("settings") or {}
        if not isinstance(settings, dict):
            raise ThemeError(f"Theme '{name}': token colour 'settings' must be an object")
        scopes = entry.get("scope")
        if scopes is None:
            # Scope-less entry carries the editor defaults.
            if settings.get("foreground") and Token not in styles:
                styles[Token] = _color(settings["foreground"], name)
            if settings.get("background") and not background:
                background = settings["background"]
            continue
        if isinstance(scopes, str):
            scopes = scopes.split(",")
        if not isinstance(scopes, list) or not all(isinstance(scope, str) for scope in scopes):
            raise ThemeError(f"Theme '{name}': 'scope' must be a string or a list of strings, got {scopes!r}")
        definition = _style_definition(settings, name)
        for scope in scopes:
            token = token_for_scope(scope.strip())
            if token is not None:
                styles[token] = definition

    attrs: dict[str, Any] = {"name": name, "styles": styles}
    if background:
        attrs["background_color"] = _color(background, name)
    return type("ThemeStyle", (Style,), attrs)


def resolve_style(theme: ThemeSpec) -> tuple[str, type[Style]]:
    """Return ``(name, style class)`` for a theme name or raw theme object."""
    if isinstance(theme, dict):
        style = style_from_theme(theme)
        return str(theme["name"]), style
    if theme in _BUILTIN_STYLES:
        return theme, _BUILTIN_STYLES[theme]
    try:
        return theme, get_style_by_name(theme)
    except ClassNotFound as exc:
        raise ThemeError(f"Unknown theme '{theme}'") from exc
