from collections.abc import Sequence
from typing import Protocol

from codex_highlight.models import ElementNode, LanguageSpec, RootNode, TextNode, ThemeSpec

# Class token the engine puts on every block container it emits.
ENGINE_BRAND_CLASS = "highlight"


class MarkupHooks(Protocol):
    """Extension points invoked while the engine assembles its output tree.

    Each hook may mutate the node in place and return ``None``, or return a
    replacement node. The engine calls ``code`` first, then ``pre`` and finally
    ``root`` on the fully assembled tree.
    """

    def code(self, node: ElementNode) -> ElementNode | TextNode | None: ...

    def pre(self, node: ElementNode) -> ElementNode | None: ...

    def root(self, node: RootNode) -> RootNode | None: ...


class Highlighter(Protocol):
    def highlight(
        self,
        code: str,
        *,
        language: str,
        theme: str,
        hooks: Sequence[MarkupHooks] = (),
    ) -> RootNode: ...


class HighlightEngine(Protocol):
    def create_highlighter(
        self,
        languages: Sequence[LanguageSpec],
        themes: Sequence[ThemeSpec],
    ) -> Highlighter: ...
