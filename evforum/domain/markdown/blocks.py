"""Block structure of rendered content.

Fenced code blocks and tables are lifted out of the text first and
replaced by placeholder lines, so nothing that follows can rewrite their
contents. The remaining text is then classified line by line (heading,
quote, list item, rule, paragraph text) and folded into block nodes.
Inline markup is parsed per line by `evforum.domain.markdown.inline`.
"""

import re

import logfire

from evforum.domain.markdown.highlight import highlight
from evforum.domain.markdown.inline import parse_inline
from evforum.domain.model.rendered import (
    Blockquote,
    BlockNode,
    CodeBlock,
    Heading,
    InlineNode,
    LineBreak,
    ListBlock,
    ListItem,
    Paragraph,
    Rule,
    Table,
    Text,
)

# Private-use code points delimit placeholders. User input containing them
# is scrubbed before extraction so it cannot forge a placeholder.
_OPEN = "\ue000"
_CLOSE = "\ue001"
_SCRUB = re.compile(f"[{_OPEN}{_CLOSE}]")
_PLACEHOLDER = re.compile(rf"^{_OPEN}(\d+){_CLOSE}$")

_FENCE = re.compile(r"(?m)^[ \t]*```[ \t]*([\w+#-]+)?[ \t]*\n([\s\S]*?)```[ \t]*$")
_TABLE = re.compile(
    r"(?m)^[ \t]*(\|[^\n]*\|)[ \t]*\n"
    r"[ \t]*(\|(?=[^\n]*-)[-:| \t]*\|)[ \t]*(?:\n|$)"
    r"((?:[ \t]*\|[^\n]*\|[ \t]*(?:\n|$))*)"
)

_HEADING = re.compile(r"^(#{1,3}) +(.+?)[ \t]*$")
_QUOTE = re.compile(r"^> (.+)$")
_ORDERED_ITEM = re.compile(r"^\d+\. (.+)$")
_UNORDERED_ITEM = re.compile(r"^[-*+] (.+)$")
_RULE = re.compile(r"^---[ \t]*$")


def _split_row(row: str) -> tuple[str, ...]:
    row = row.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|"):
        row = row[:-1]
    return tuple(cell.strip() for cell in row.split("|"))


def _extract(text: str, extracted: list[BlockNode]) -> str:
    """Replace fenced code and tables with placeholder lines."""

    def placeholder(node: BlockNode) -> str:
        extracted.append(node)
        return f"\n{_OPEN}{len(extracted) - 1}{_CLOSE}\n"

    def code_block(match: re.Match[str]) -> str:
        language = match.group(1)
        code = match.group(2).strip("\n")
        return placeholder(
            CodeBlock(language=language, code=code, tokens=highlight(code, language))
        )

    def table(match: re.Match[str]) -> str:
        rows = tuple(
            _split_row(line) for line in match.group(3).split("\n") if line.strip()
        )
        return placeholder(Table(header=_split_row(match.group(1)), rows=rows))

    text = _FENCE.sub(code_block, text)
    return _TABLE.sub(table, text)


def _inline_lines(lines: list[str]) -> tuple[InlineNode, ...]:
    """Parse lines joined by LineBreak nodes."""
    children: list[InlineNode] = []
    for index, line in enumerate(lines):
        if index:
            children.append(LineBreak())
        children.extend(parse_inline(line))
    return tuple(children)


class _BlockBuilder:
    """Folds classified lines into block nodes.

    At most one of paragraph, quote or list run is open at a time; starting
    a different kind of block closes the open one.
    """

    def __init__(self) -> None:
        self.blocks: list[BlockNode] = []
        self._paragraph: list[str] = []
        self._quote: list[str] = []
        self._items: list[str] = []
        self._ordered = False

    def close(self) -> None:
        if self._paragraph:
            self.blocks.append(Paragraph(children=_inline_lines(self._paragraph)))
            self._paragraph = []
        if self._quote:
            self.blocks.append(Blockquote(children=_inline_lines(self._quote)))
            self._quote = []
        if self._items:
            items = tuple(
                ListItem(ordered=self._ordered, children=parse_inline(item))
                for item in self._items
            )
            self.blocks.append(ListBlock(ordered=self._ordered, items=items))
            self._items = []

    def block(self, node: BlockNode) -> None:
        self.close()
        self.blocks.append(node)

    def quote_line(self, line: str) -> None:
        if not self._quote:
            self.close()
        self._quote.append(line)

    def list_item(self, line: str, ordered: bool) -> None:
        if not self._items or self._ordered != ordered:
            self.close()
        self._ordered = ordered
        self._items.append(line)

    def text_line(self, line: str) -> None:
        if not self._paragraph:
            self.close()
        self._paragraph.append(line)


def _render(raw: str) -> tuple[BlockNode, ...]:
    text = _SCRUB.sub("\ufffd", raw.replace("\r\n", "\n").replace("\r", "\n"))
    extracted: list[BlockNode] = []
    text = _extract(text, extracted)

    builder = _BlockBuilder()
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped:
            builder.close()
            continue

        placeholder = _PLACEHOLDER.match(stripped)
        if placeholder:
            builder.block(extracted[int(placeholder.group(1))])
            continue
        heading = _HEADING.match(stripped)
        if heading:
            builder.block(
                Heading(
                    level=len(heading.group(1)),
                    children=parse_inline(heading.group(2)),
                )
            )
            continue
        quote = _QUOTE.match(stripped)
        if quote:
            builder.quote_line(quote.group(1).strip())
            continue
        ordered = _ORDERED_ITEM.match(stripped)
        unordered = _UNORDERED_ITEM.match(stripped)
        if ordered or unordered:
            item = ordered or unordered
            builder.list_item(item.group(1).strip(), ordered=bool(ordered))
        elif _RULE.match(stripped):
            builder.block(Rule())
        else:
            builder.text_line(stripped)

    builder.close()
    return tuple(builder.blocks)


def render(raw: str) -> tuple[BlockNode, ...]:
    """Render raw user text into block nodes.

    Pure and total: the same input always yields an equal result, and
    malformed markup degrades to literal text instead of raising. Empty or
    whitespace-only input yields an empty tuple.

    Args:
        raw: Text exactly as the user typed it

    Returns:
        Tuple of block nodes
    """
    if not raw or not raw.strip():
        return ()
    try:
        return _render(raw)
    except Exception as e:
        logfire.warn("markdown.render_fallback", error=str(e), length=len(raw))
        return (Paragraph(children=(Text(text=raw.strip()),)),)
