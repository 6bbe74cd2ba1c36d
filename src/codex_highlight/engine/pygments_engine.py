"""Engine adapter: Pygments lexers and styles behind the highlighter port."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pygments.lexer import Lexer
from pygments.lexers import get_all_lexers, get_lexer_by_name, guess_lexer
from pygments.lexers.special import TextLexer
from pygments.style import Style
from pygments.token import Token
from pygments.util import ClassNotFound

from codex_highlight.core.errors import EngineError, GrammarError
from codex_highlight.core.ports.engine import ENGINE_BRAND_CLASS, MarkupHooks
from codex_highlight.engine.grammars import build_lexer_class
from codex_highlight.engine.themes import resolve_style
from codex_highlight.models import (
    ElementNode,
    LanguageName,
    LanguageSentinel,
    LanguageSpec,
    RawLanguage,
    RootNode,
    SpecialLanguage,
    TextNode,
    ThemeSpec,
)

logger = logging.getLogger(__name__)

_LEXER_OPTIONS: dict[str, Any] = {"stripnl": False, "ensurenl": False}

# A lexer that keeps emitting empty tokens is not advancing through the input.
_MAX_EMPTY_TOKENS = 1000


def available_languages() -> list[tuple[str, list[str]]]:
    """Return ``(display name, aliases)`` for every lexer Pygments ships."""
    return sorted((name, list(aliases)) for name, aliases, _, _ in get_all_lexers() if aliases)


def _token_css(style: type[Style], ttype: Any) -> str:
    definition = style.style_for_token(ttype)
    parts: list[str] = []
    if definition["color"]:
        parts.append(f"color:#{definition['color']}")
    if definition["bgcolor"]:
        parts.append(f"background-color:#{definition['bgcolor']}")
    if definition["italic"]:
        parts.append("font-style:italic")
    if definition["bold"]:
        parts.append("font-weight:bold")
    if definition["underline"]:
        parts.append("text-decoration:underline")
    return ";".join(parts)


def _container_css(style: type[Style]) -> str:
    css = ""
    if style.background_color:
        css += f"background-color:#{style.background_color.lstrip('#')};"
    foreground = style.style_for_token(Token)["color"]
    if foreground:
        css += f"color:#{foreground};"
    return css


class PygmentsHighlighter:
    """Holds the lexers and styles registered for one (languages, themes) set.

    Implements the ``Highlighter`` protocol. A registered value of ``None``
    marks the auto-detect sentinel, resolved per call with ``guess_lexer``.
    """

    def __init__(self, lexers: dict[str, Lexer | None], styles: dict[str, type[Style]]) -> None:
        self._lexers = lexers
        self._styles = styles

    @property
    def languages(self) -> list[str]:
        return sorted(self._lexers)

    @property
    def themes(self) -> list[str]:
        return sorted(self._styles)

    def _lexer_for(self, language: str, code: str) -> Lexer:
        key = language.lower()
        if key not in self._lexers:
            raise EngineError(f"Language '{language}' is not registered with this highlighter")
        lexer = self._lexers[key]
        if lexer is not None:
            return lexer
        try:
            return guess_lexer(code, **_LEXER_OPTIONS)
        except ClassNotFound:
            return TextLexer(**_LEXER_OPTIONS)

    def _tokenize_lines(self, lexer: Lexer, code: str, style: type[Style]) -> list[list[tuple[str, str]]]:
        css_cache: dict[Any, str] = {}
        lines: list[list[tuple[str, str]]] = [[]]
        empty_run = 0
        for ttype, value in lexer.get_tokens(code):
            if not value:
                empty_run += 1
                if empty_run > _MAX_EMPTY_TOKENS:
                    raise EngineError(f"Lexer {lexer.name!r} stopped advancing through the input")
                continue
            empty_run = 0
            if ttype not in css_cache:
                css_cache[ttype] = _token_css(style, ttype)
            css = css_cache[ttype]
            for index, part in enumerate(value.split("\n")):
                if index:
                    lines.append([])
                if not part:
                    continue
                line = lines[-1]
                if line and line[-1][0] == css:
                    line[-1] = (css, line[-1][1] + part)
                else:
                    line.append((css, part))
        return lines

    def highlight(
        self,
        code: str,
        *,
        language: str,
        theme: str,
        hooks: Sequence[MarkupHooks] = (),
    ) -> RootNode:
        style = self._styles.get(theme)
        if style is None:
            raise EngineError(f"Theme '{theme}' is not registered with this highlighter")
        lexer = self._lexer_for(language, code)

        line_nodes: list[ElementNode | TextNode] = []
        for index, line in enumerate(self._tokenize_lines(lexer, code, style)):
            if index:
                line_nodes.append(TextNode(value="\n"))
            spans: list[ElementNode | TextNode] = [
                ElementNode(
                    tag="span",
                    properties={"style": css} if css else {},
                    children=[TextNode(value=text)],
                )
                for css, text in line
            ]
            line_nodes.append(ElementNode(tag="span", properties={"class": "line"}, children=spans))

        code_node: ElementNode | TextNode = ElementNode(tag="code", children=line_nodes)
        for hook in hooks:
            code_hook = getattr(hook, "code", None)
            if code_hook is None or not isinstance(code_node, ElementNode):
                continue
            replacement = code_hook(code_node)
            if replacement is not None:
                code_node = replacement

        pre_node = ElementNode(
            tag="pre",
            properties={
                "class": f"{ENGINE_BRAND_CLASS} {theme}",
                "style": _container_css(style),
                "tabindex": "0",
            },
            children=[code_node],
        )
        for hook in hooks:
            pre_hook = getattr(hook, "pre", None)
            if pre_hook is None:
                continue
            replacement = pre_hook(pre_node)
            if replacement is not None:
                pre_node = replacement

        root = RootNode(children=[pre_node])
        for hook in hooks:
            root_hook = getattr(hook, "root", None)
            if root_hook is None:
                continue
            replacement = root_hook(root)
            if replacement is not None:
                root = replacement
        return root


class PygmentsEngine:
    """Implements the ``HighlightEngine`` protocol on top of Pygments."""

    def _create_lexer(self, spec: LanguageSpec) -> tuple[list[str], Lexer | None]:
        if isinstance(spec, LanguageSentinel):
            if spec.kind is SpecialLanguage.AUTO:
                return [spec.kind.value], None
            return [spec.kind.value], TextLexer(**_LEXER_OPTIONS)
        if isinstance(spec, LanguageName):
            try:
                return [spec.name], get_lexer_by_name(spec.name, **_LEXER_OPTIONS)
            except ClassNotFound as exc:
                raise GrammarError(f"Unknown language '{spec.name}'") from exc
        if isinstance(spec, RawLanguage):
            lexer_cls = build_lexer_class(spec.descriptor)
            try:
                lexer = lexer_cls(**_LEXER_OPTIONS)
            except ValueError as exc:
                raise GrammarError(str(exc)) from exc
            return list(lexer_cls.aliases), lexer
        raise TypeError(f"Unsupported language spec: {spec!r}")

    def create_highlighter(
        self,
        languages: Sequence[LanguageSpec],
        themes: Sequence[ThemeSpec],
    ) -> PygmentsHighlighter:
        lexers: dict[str, Lexer | None] = {}
        for spec in languages:
            names, lexer = self._create_lexer(spec)
            for name in names:
                lexers[name.lower()] = lexer

        styles: dict[str, type[Style]] = {}
        for theme in themes:
            name, style = resolve_style(theme)
            styles[name] = style

        logger.debug("Registered languages %s and themes %s", sorted(lexers), sorted(styles))
        return PygmentsHighlighter(lexers, styles)
