"""Plain-text output target, used for thread excerpts and search indexing."""

from functools import singledispatch
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
)


def to_plain_text(nodes: Iterable[RenderedNode]) -> str:
    """Render nodes to plain text. Blocks are separated by a blank line."""
    blocks = (_text(node) for node in nodes)
    return "\n\n".join(block for block in blocks if block)


def _inline(nodes: Iterable[RenderedNode]) -> str:
    return "".join(_text(node) for node in nodes)


@singledispatch
def _text(node: RenderedNode) -> str:
    raise TypeError(f"No plain-text rendering for {type(node).__name__}")


@_text.register
def _(node: Text) -> str:
    return node.text


@_text.register
def _(node: LineBreak) -> str:
    return "\n"


@_text.register
def _(node: InlineCode) -> str:
    return node.code


@_text.register(Bold)
@_text.register(Italic)
@_text.register(Strikethrough)
@_text.register(Link)
@_text.register(Paragraph)
@_text.register(Heading)
@_text.register(Blockquote)
def _(node) -> str:
    return _inline(node.children)


@_text.register
def _(node: Image) -> str:
    return node.alt


@_text.register
def _(node: CodeBlock) -> str:
    return node.code


@_text.register
def _(node: ListItem) -> str:
    return _inline(node.children)


@_text.register
def _(node: ListBlock) -> str:
    lines = []
    for number, item in enumerate(node.items, start=1):
        marker = f"{number}." if node.ordered else "-"
        lines.append(f"{marker} {_text(item)}")
    return "\n".join(lines)


@_text.register
def _(node: Table) -> str:
    return "\n".join(" | ".join(row) for row in (node.header, *node.rows))


@_text.register
def _(node: Rule) -> str:
    return ""
