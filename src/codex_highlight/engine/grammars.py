"""Compile TextMate-style grammar descriptors into Pygments lexers.

Supported rule shapes: ``match``, ``begin``/``end`` regions (with nested
``patterns`` and ``contentName``), bare ``patterns`` groups and ``include`` of
``#repository`` entries or ``$self``. Scope names map onto Pygments token
types by longest dotted prefix.
"""

from __future__ import annotations

import re
import string
from typing import Any

from pygments.lexer import RegexLexer, include
from pygments.token import (
    Comment,
    Error,
    Generic,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    Text,
    _TokenType,
)

from codex_highlight.core.errors import GrammarError

_SCOPE_TOKENS: dict[str, _TokenType] = {
    "comment": Comment,
    "constant": Name.Constant,
    "constant.character.escape": String.Escape,
    "constant.language": Keyword.Constant,
    "constant.numeric": Number,
    "entity.name": Name,
    "entity.name.class": Name.Class,
    "entity.name.function": Name.Function,
    "entity.name.tag": Name.Tag,
    "entity.name.type": Name.Class,
    "entity.other.attribute-name": Name.Attribute,
    "invalid": Error,
    "keyword": Keyword,
    "keyword.operator": Operator,
    "markup.bold": Generic.Strong,
    "markup.deleted": Generic.Deleted,
    "markup.heading": Generic.Heading,
    "markup.inserted": Generic.Inserted,
    "markup.italic": Generic.Emph,
    "markup.underline.link": Name.Label,
    "punctuation": Punctuation,
    "storage": Keyword.Declaration,
    "storage.type": Keyword.Type,
    "string": String,
    "string.interpolated": String.Interpol,
    "string.regexp": String.Regex,
    "support.function": Name.Builtin,
    "support.type": Keyword.Type,
    "variable": Name.Variable,
    "variable.language": Name.Builtin.Pseudo,
    "variable.parameter": Name.Variable,
}

_ANY_CHAR = r"[\s\S]"

# Every rule is tried at each offset of this text; an empty match anywhere
# would stall the lexer at that offset.
_ZERO_WIDTH_SAMPLE = string.printable + "\n\nexport KEY='v'\n\tx = 1  # c\n"


def token_for_scope(scope: str | None) -> _TokenType | None:
    """Map a TextMate scope (``keyword.control.python``) to a token type."""
    if not scope:
        return None
    parts = scope.split()[0].split(".")
    for length in range(len(parts), 0, -1):
        token = _SCOPE_TOKENS.get(".".join(parts[:length]))
        if token is not None:
            return token
    return None


class _GrammarCompiler:
    def __init__(self, name: str, repository: dict[str, Any]) -> None:
        self.name = name
        self.repository = repository
        self.states: dict[str, list[Any]] = {}
        self._region_states: dict[int, str] = {}
        self._including: list[str] = []

    def compile(self, patterns: Any) -> dict[str, list[Any]]:
        self.states["main"] = self._rules(patterns, top_level=True)
        self.states["root"] = [include("main"), (_ANY_CHAR, Text)]
        return self.states

    def _fail(self, message: str) -> GrammarError:
        return GrammarError(f"Grammar '{self.name}': {message}")

    def _regex(self, value: Any) -> str:
        if not isinstance(value, str):
            raise self._fail(f"pattern must be a string, got {value!r}")
        try:
            compiled = re.compile(value, re.MULTILINE)
        except re.error as exc:
            raise self._fail(f"invalid regex {value!r}: {exc}") from exc
        for pos in range(len(_ZERO_WIDTH_SAMPLE) + 1):
            m = compiled.match(_ZERO_WIDTH_SAMPLE, pos)
            if m is not None and m.end() == pos:
                raise self._fail(f"regex {value!r} matches the empty string")
        return value

    def _rules(self, patterns: Any, top_level: bool = False) -> list[Any]:
        if not isinstance(patterns, list):
            raise self._fail("'patterns' must be a list")
        rules: list[Any] = []
        for pattern in patterns:
            rules.extend(self._rule(pattern, top_level))
        return rules

    def _rule(self, pattern: Any, top_level: bool) -> list[Any]:
        if not isinstance(pattern, dict):
            raise self._fail(f"rule must be an object, got {pattern!r}")
        if "include" in pattern:
            return self._include(pattern["include"], top_level)
        if "match" in pattern:
            return [(self._regex(pattern["match"]), token_for_scope(pattern.get("name")) or Text)]
        if "begin" in pattern:
            if "end" not in pattern:
                raise self._fail(f"region {pattern['begin']!r} has no 'end'")
            state = self._region(pattern)
            return [(self._regex(pattern["begin"]), token_for_scope(pattern.get("name")) or Text, state)]
        if "patterns" in pattern:
            return self._rules(pattern["patterns"], top_level)
        raise self._fail("rule has neither 'match', 'begin', 'include' nor 'patterns'")

    def _include(self, reference: Any, top_level: bool) -> list[Any]:
        if reference in ("$self", "$base"):
            return [] if top_level else [include("main")]
        if isinstance(reference, str) and reference.startswith("#"):
            key = reference[1:]
            if key not in self.repository:
                raise self._fail(f"unknown repository entry '{key}'")
            if key in self._including:
                raise self._fail(f"circular include of '{key}'")
            self._including.append(key)
            try:
                return self._rule(self.repository[key], top_level)
            finally:
                self._including.pop()
        raise self._fail(f"unsupported include {reference!r}")

    def _region(self, pattern: dict[str, Any]) -> str:
        state = self._region_states.get(id(pattern))
        if state is not None:
            return state
        state = f"region{len(self._region_states)}"
        self._region_states[id(pattern)] = state

        scope_token = token_for_scope(pattern.get("name")) or Text
        content_token = token_for_scope(pattern.get("contentName")) or scope_token
        # Entering a region is a state push, so includes inside it start a fresh chain.
        saved, self._including = self._including, []
        try:
            inner = self._rules(pattern.get("patterns", []))
        finally:
            self._including = saved
        self.states[state] = [
            (self._regex(pattern["end"]), scope_token, "#pop"),
            *inner,
            (_ANY_CHAR, content_token),
        ]
        return state


def _class_name(name: str) -> str:
    return "".join(part.capitalize() for part in re.split(r"[^0-9A-Za-z]+", name) if part) or "Custom"


def build_lexer_class(descriptor: dict[str, Any]) -> type[RegexLexer]:
    name = descriptor.get("name")
    if not isinstance(name, str) or not name:
        raise GrammarError("Grammar descriptor has no 'name'")
    if "patterns" not in descriptor:
        raise GrammarError(f"Grammar '{name}' has no 'patterns'")
    repository = descriptor.get("repository") or {}
    if not isinstance(repository, dict):
        raise GrammarError(f"Grammar '{name}': 'repository' must be an object")

    tokens = _GrammarCompiler(name, repository).compile(descriptor["patterns"])
    extra_aliases = descriptor.get("aliases") or []
    if isinstance(extra_aliases, str):
        extra_aliases = [extra_aliases]
    if not isinstance(extra_aliases, list) or not all(isinstance(alias, str) for alias in extra_aliases):
        raise GrammarError(f"Grammar '{name}': 'aliases' must be a list of strings")
    aliases = [name, *extra_aliases]
    return type(
        f"{_class_name(name)}Lexer",
        (RegexLexer,),
        {
            "name": descriptor.get("displayName", name),
            "aliases": aliases,
            "filenames": [],
            "flags": re.MULTILINE,
            "tokens": tokens,
        },
    )
