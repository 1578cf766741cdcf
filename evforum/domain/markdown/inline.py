"""Inline markup rules.

Rules are applied in strict precedence. A rule runs over the whole text
it is given; the gaps between its matches go to the next rule down, and
the interior of a container match (bold, italic, strikethrough, link text)
is parsed again from the top. Leaf matches (inline code, images) are never
re-scanned, so a later rule cannot reinterpret markup an earlier rule
already consumed.
"""

import re
from typing import Callable

from evforum.domain.markdown.sanitize import safe_url
from evforum.domain.model.rendered import (
    Bold,
    Image,
    InlineCode,
    InlineNode,
    Italic,
    Link,
    Strikethrough,
    Text,
)

Builder = Callable[[re.Match[str]], list[InlineNode]]


def _parse_children(text: str) -> tuple[InlineNode, ...]:
    return tuple(_merge_text(_apply(text, 0)))


def _triple(match: re.Match[str]) -> list[InlineNode]:
    return [Bold(children=(Italic(children=_parse_children(match.group(1))),))]


def _bold(match: re.Match[str]) -> list[InlineNode]:
    return [Bold(children=_parse_children(match.group(1)))]


def _italic(match: re.Match[str]) -> list[InlineNode]:
    return [Italic(children=_parse_children(match.group(1)))]


def _strikethrough(match: re.Match[str]) -> list[InlineNode]:
    return [Strikethrough(children=_parse_children(match.group(1)))]


def _inline_code(match: re.Match[str]) -> list[InlineNode]:
    return [InlineCode(code=match.group(1))]


def _image(match: re.Match[str]) -> list[InlineNode]:
    src = safe_url(match.group(2))
    if src is None:
        return [Text(text=match.group(0))]
    return [Image(src=src, alt=match.group(1))]


def _link(match: re.Match[str]) -> list[InlineNode]:
    href = safe_url(match.group(2))
    if href is None:
        return [Text(text=match.group(0))]
    return [Link(href=href, children=_parse_children(match.group(1)))]


# Emphasis content must start and end next to its markers, so "2 * 3 * 4"
# and a bare "***" stay text.
_STARS = r"(?=[^\s*])(.+?)(?<=[^\s*])"
_TILDES = r"(?=[^\s~])(.+?)(?<=[^\s~])"

# Highest precedence first
_RULES: tuple[tuple[re.Pattern[str], Builder], ...] = (
    (re.compile(rf"\*\*\*{_STARS}\*\*\*"), _triple),
    (re.compile(rf"\*\*{_STARS}\*\*"), _bold),
    (re.compile(rf"\*{_STARS}\*"), _italic),
    (re.compile(rf"~~{_TILDES}~~"), _strikethrough),
    (re.compile(r"`([^`\n]+)`"), _inline_code),
    (re.compile(r"!\[([^\]\n]*)\]\(([^)\s]+)\)"), _image),
    (re.compile(r"\[([^\]\n]+)\]\(([^)\s]+)\)"), _link),
)


def _apply(text: str, rule_index: int) -> list[InlineNode]:
    if not text:
        return []
    if rule_index >= len(_RULES):
        return [Text(text=text)]

    pattern, build = _RULES[rule_index]
    nodes: list[InlineNode] = []
    position = 0
    for match in pattern.finditer(text):
        nodes.extend(_apply(text[position : match.start()], rule_index + 1))
        nodes.extend(build(match))
        position = match.end()
    nodes.extend(_apply(text[position:], rule_index + 1))
    return nodes


def _merge_text(nodes: list[InlineNode]) -> list[InlineNode]:
    """Join adjacent Text nodes so output does not depend on rule splits."""
    merged: list[InlineNode] = []
    for node in nodes:
        if isinstance(node, Text) and merged and isinstance(merged[-1], Text):
            merged[-1] = Text(text=merged[-1].text + node.text)
        else:
            merged.append(node)
    return merged


def parse_inline(line: str) -> tuple[InlineNode, ...]:
    """Parse one line of text into inline nodes."""
    return _parse_children(line)
