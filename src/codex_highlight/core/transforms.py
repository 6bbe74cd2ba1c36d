"""Post-processing hooks applied to the engine's markup tree."""

from __future__ import annotations

import re
from collections.abc import Iterator

from codex_highlight.core.ports.engine import ENGINE_BRAND_CLASS
from codex_highlight.models import ElementNode, RootNode, TextNode, WrapMode

BRAND_CLASS = "codex-code"
CSS_VARIABLES_THEME = "css-variables"

WRAP_STYLES = {
    WrapMode.UNSTYLED: "",
    WrapMode.NO_WRAP: "overflow-x: auto;",
    WrapMode.WRAP: "overflow-x: auto; white-space: pre-wrap; word-wrap: break-word;",
}

# Placeholder colours emitted by the css-variables theme.
COLOR_REPLACEMENTS = {
    "#000001": "var(--codex-code-color-text)",
    "#000002": "var(--codex-code-color-background)",
    "#000004": "var(--codex-code-token-constant)",
    "#000005": "var(--codex-code-token-string)",
    "#000006": "var(--codex-code-token-comment)",
    "#000007": "var(--codex-code-token-keyword)",
    "#000008": "var(--codex-code-token-parameter)",
    "#000009": "var(--codex-code-token-function)",
    "#000010": "var(--codex-code-token-string-expression)",
    "#000011": "var(--codex-code-token-punctuation)",
    "#000012": "var(--codex-code-token-link)",
}

_COLOR_PLACEHOLDER_RE = re.compile(
    "(" + "|".join(re.escape(color) for color in COLOR_REPLACEMENTS) + ")(?![0-9a-fA-F])",
)


def replace_css_variables(style: str) -> str:
    """Swap colour placeholders in a style declaration for CSS custom properties."""
    return _COLOR_PLACEHOLDER_RE.sub(lambda m: COLOR_REPLACEMENTS[m.group(1)], style)


def iter_elements(node: RootNode | ElementNode) -> Iterator[ElementNode]:
    """Yield every element below ``node`` depth-first, in document order."""
    for child in node.children:
        if isinstance(child, ElementNode):
            yield child
            yield from iter_elements(child)


class CodeTransformer:
    """Built-in hooks: inline collapsing, brand classes, wrap styles, CSS variables.

    Implements the ``MarkupHooks`` protocol.
    """

    def __init__(
        self,
        *,
        inline: bool = False,
        wrap: WrapMode = WrapMode.NO_WRAP,
        theme: str = "",
        language: str = "",
    ) -> None:
        self.inline = inline
        self.wrap = wrap
        self.theme = theme
        self.language = language

    def code(self, node: ElementNode) -> ElementNode | TextNode | None:
        if self.inline and node.children:
            return node.children[0]
        return None

    def pre(self, node: ElementNode) -> ElementNode | None:
        if self.inline:
            node.tag = "code"

        classes = node.properties.get("class")
        if classes is not None:
            node.properties["class"] = classes.replace(ENGINE_BRAND_CLASS, BRAND_CLASS)

        extra_style = WRAP_STYLES[self.wrap]
        if extra_style:
            node.properties["style"] = node.properties.get("style", "") + extra_style

        if self.language:
            node.properties["data-language"] = self.language
        return None

    def root(self, node: RootNode) -> RootNode | None:
        if self.theme != CSS_VARIABLES_THEME:
            return None
        for element in iter_elements(node):
            style = element.properties.get("style")
            if style:
                element.properties["style"] = replace_css_variables(style)
        return None
