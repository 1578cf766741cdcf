"""Rendered content nodes.

The markdown pipeline turns raw user text into a tuple of these nodes.
The set of node kinds is closed: every node carries a `kind` literal and
the unions below are pydantic discriminated unions, so rendered content
round-trips through JSON unchanged.

Nodes are only ever produced by `evforum.domain.markdown.render`.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import Field

from evforum.domain.model.common import DomainModel


# Inline nodes


class Text(DomainModel):
    """Literal text. Escaped by output targets, never here."""

    kind: Literal["text"] = "text"
    text: str


class LineBreak(DomainModel):
    kind: Literal["line_break"] = "line_break"


class InlineCode(DomainModel):
    kind: Literal["inline_code"] = "inline_code"
    code: str


class Bold(DomainModel):
    kind: Literal["bold"] = "bold"
    children: tuple["InlineNode", ...]


class Italic(DomainModel):
    kind: Literal["italic"] = "italic"
    children: tuple["InlineNode", ...]


class Strikethrough(DomainModel):
    kind: Literal["strikethrough"] = "strikethrough"
    children: tuple["InlineNode", ...]


class Link(DomainModel):
    """Hyperlink. `href` has passed the URL policy."""

    kind: Literal["link"] = "link"
    href: str
    children: tuple["InlineNode", ...]


class Image(DomainModel):
    """Inline image. `src` has passed the URL policy."""

    kind: Literal["image"] = "image"
    src: str
    alt: str = ""


InlineNode = Annotated[
    Union[Text, LineBreak, InlineCode, Bold, Italic, Strikethrough, Link, Image],
    Field(discriminator="kind"),
]


# Block nodes


class TokenKind(str, Enum):
    """Highlighting class of a code token."""

    PLAIN = "plain"
    KEYWORD = "keyword"
    LITERAL = "literal"
    TYPE = "type"
    STRING = "string"
    COMMENT = "comment"
    NUMBER = "number"
    KEY = "key"


class CodeToken(DomainModel):
    kind: TokenKind = TokenKind.PLAIN
    text: str


class Paragraph(DomainModel):
    kind: Literal["paragraph"] = "paragraph"
    children: tuple[InlineNode, ...]


class Heading(DomainModel):
    kind: Literal["heading"] = "heading"
    level: int = Field(ge=1, le=3)
    children: tuple[InlineNode, ...]


class CodeBlock(DomainModel):
    """Fenced code block.

    `tokens` is None when the language is missing or has no highlighter;
    the code is then shown as plain text.
    """

    kind: Literal["code_block"] = "code_block"
    language: str | None = None
    code: str
    tokens: tuple[CodeToken, ...] | None = None


class Blockquote(DomainModel):
    kind: Literal["blockquote"] = "blockquote"
    children: tuple[InlineNode, ...]


class ListItem(DomainModel):
    kind: Literal["list_item"] = "list_item"
    ordered: bool = False
    children: tuple[InlineNode, ...]


class ListBlock(DomainModel):
    """Run of consecutive list items of the same kind."""

    kind: Literal["list"] = "list"
    ordered: bool = False
    items: tuple[ListItem, ...]


class Table(DomainModel):
    """Pipe table. Cells are literal text."""

    kind: Literal["table"] = "table"
    header: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()


class Rule(DomainModel):
    kind: Literal["rule"] = "rule"


BlockNode = Annotated[
    Union[Paragraph, Heading, CodeBlock, Blockquote, ListBlock, Table, Rule],
    Field(discriminator="kind"),
]

RenderedNode = Union[
    Text,
    LineBreak,
    InlineCode,
    Bold,
    Italic,
    Strikethrough,
    Link,
    Image,
    Paragraph,
    Heading,
    CodeBlock,
    Blockquote,
    ListItem,
    ListBlock,
    Table,
    Rule,
]

for _model in (
    Bold,
    Italic,
    Strikethrough,
    Link,
    Paragraph,
    Heading,
    Blockquote,
    ListItem,
    ListBlock,
):
    _model.model_rebuild()
