from codex_highlight.engine.markup import to_html
from codex_highlight.engine.pygments_engine import PygmentsEngine, PygmentsHighlighter, available_languages
from codex_highlight.engine.themes import CssVariablesStyle, available_themes

__all__ = [
    "CssVariablesStyle",
    "PygmentsEngine",
    "PygmentsHighlighter",
    "available_languages",
    "available_themes",
    "to_html",
]
