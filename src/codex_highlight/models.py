from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from codex_highlight.core.ports.engine import MarkupHooks


# ---------------------------------------------------------------------------
# Markup tree
# ---------------------------------------------------------------------------


class TextNode(BaseModel):
    type: Literal["text"] = "text"
    value: str


class ElementNode(BaseModel):
    type: Literal["element"] = "element"
    tag: str
    properties: dict[str, str] = Field(default_factory=dict)
    children: list[ElementNode | TextNode] = Field(default_factory=list)


class RootNode(BaseModel):
    type: Literal["root"] = "root"
    children: list[ElementNode | TextNode] = Field(default_factory=list)


ElementNode.model_rebuild()  # necessary for recursive types
RootNode.model_rebuild()

MarkupNode = RootNode | ElementNode | TextNode


# ---------------------------------------------------------------------------
# Language and theme descriptors
# ---------------------------------------------------------------------------


class SpecialLanguage(str, Enum):
    PLAINTEXT = "plaintext"
    AUTO = "auto"


@dataclass(frozen=True)
class LanguageName:
    """A language identifier the engine already knows (e.g. ``python``)."""

    name: str


@dataclass(frozen=True)
class LanguageSentinel:
    kind: SpecialLanguage


@dataclass(frozen=True)
class RawLanguage:
    """An inline grammar descriptor, possibly in one of the legacy shapes.

    Legacy shapes carry ``id`` instead of ``name``, nest the grammar body under
    ``grammar``, or reference a JSON grammar file through ``path``.
    """

    descriptor: dict[str, Any]


LanguageSpec = LanguageName | LanguageSentinel | RawLanguage

ThemeSpec = str | dict[str, Any]


def theme_name(theme: ThemeSpec) -> str:
    if isinstance(theme, str):
        return theme
    return str(theme.get("name", ""))


# ---------------------------------------------------------------------------
# Render input
# ---------------------------------------------------------------------------


class WrapMode(str, Enum):
    NO_WRAP = "nowrap"
    WRAP = "wrap"
    UNSTYLED = "unstyled"

    @classmethod
    def from_flag(cls, wrap: bool | None) -> WrapMode:
        """Map the ``wrap: bool | None`` option style to a mode."""
        if wrap is None:
            return cls.UNSTYLED
        return cls.WRAP if wrap else cls.NO_WRAP


@dataclass(frozen=True)
class CodeInput:
    code: str
    language: LanguageSpec
    theme: ThemeSpec
    wrap: WrapMode = WrapMode.NO_WRAP
    inline: bool = False
    transformers: Sequence[MarkupHooks] = field(default_factory=tuple)
