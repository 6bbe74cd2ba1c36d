from html import escape

from codex_highlight.models import ElementNode, RootNode, TextNode


def to_html(node: RootNode | ElementNode | TextNode) -> str:
    """Serialize a markup tree to an HTML string."""
    if isinstance(node, TextNode):
        return escape(node.value, quote=False)
    inner = "".join(to_html(child) for child in node.children)
    if isinstance(node, RootNode):
        return inner
    attrs = "".join(f' {name}="{escape(value)}"' for name, value in node.properties.items())
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
