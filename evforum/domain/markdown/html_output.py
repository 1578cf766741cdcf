"""HTML output target.

Every literal string and attribute value is escaped here, including the
code inside code blocks and table cells. URLs were already checked by the
URL policy when the nodes were built.
"""

from functools import singledispatch
from html import escape
from typing import Iterable

from evforum.domain.model.rendered import (
    Blockquote,
    Bold,
    CodeBlock,
    Heading,
    Image,
    InlineCode,
    Italic,
    LineBreak,
    Link,
    ListBlock,
    ListItem,
    Paragraph,
    RenderedNode,
    Rule,
    Strikethrough,
    Table,
    Text,
    TokenKind,
)


def to_html(nodes: Iterable[RenderedNode]) -> str:
    """Render nodes to an HTML fragment."""
    return "".join(_html(node) for node in nodes)


@singledispatch
def _html(node: RenderedNode) -> str:
    raise TypeError(f"No HTML rendering for {type(node).__name__}")


@_html.register
def _(node: Text) -> str:
    return escape(node.text)


@_html.register
def _(node: LineBreak) -> str:
    return "<br />"


@_html.register
def _(node: InlineCode) -> str:
    return f"<code>{escape(node.code)}</code>"


@_html.register
def _(node: Bold) -> str:
    return f"<strong>{to_html(node.children)}</strong>"


@_html.register
def _(node: Italic) -> str:
    return f"<em>{to_html(node.children)}</em>"


@_html.register
def _(node: Strikethrough) -> str:
    return f"<del>{to_html(node.children)}</del>"


@_html.register
def _(node: Link) -> str:
    return (
        f'<a href="{escape(node.href)}" target="_blank" '
        f'rel="noopener noreferrer nofollow">{to_html(node.children)}</a>'
    )


@_html.register
def _(node: Image) -> str:
    return f'<img src="{escape(node.src)}" alt="{escape(node.alt)}" loading="lazy" />'


@_html.register
def _(node: Paragraph) -> str:
    return f"<p>{to_html(node.children)}</p>"


@_html.register
def _(node: Heading) -> str:
    return f"<h{node.level}>{to_html(node.children)}</h{node.level}>"


@_html.register
def _(node: CodeBlock) -> str:
    if node.tokens is None:
        body = escape(node.code)
    else:
        body = "".join(
            escape(token.text)
            if token.kind is TokenKind.PLAIN
            else f'<span class="token-{token.kind.value}">{escape(token.text)}</span>'
            for token in node.tokens
        )
    language = (
        f' class="language-{escape(node.language)}"' if node.language else ""
    )
    return f"<pre><code{language}>{body}</code></pre>"


@_html.register
def _(node: Blockquote) -> str:
    return f"<blockquote>{to_html(node.children)}</blockquote>"


@_html.register
def _(node: ListItem) -> str:
    return f"<li>{to_html(node.children)}</li>"


@_html.register
def _(node: ListBlock) -> str:
    tag = "ol" if node.ordered else "ul"
    return f"<{tag}>{to_html(node.items)}</{tag}>"


@_html.register
def _(node: Table) -> str:
    header = "".join(f"<th>{escape(cell)}</th>" for cell in node.header)
    rows = "".join(
        "<tr>" + "".join(f"<td>{escape(cell)}</td>" for cell in row) + "</tr>"
        for row in node.rows
    )
    return (
        f"<table><thead><tr>{header}</tr></thead>"
        f"<tbody>{rows}</tbody></table>"
    )


@_html.register
def _(node: Rule) -> str:
    return "<hr />"
