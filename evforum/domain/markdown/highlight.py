"""Syntax highlighting for fenced code blocks.

Each supported language is a single alternation regex with one named
group per token kind. Alternatives are tried left to right, so comments
and strings win over keywords appearing inside them. Text between matches
becomes PLAIN tokens; concatenating the token texts always yields the
original code.
"""

import re

from evforum.domain.model.rendered import CodeToken, TokenKind

_DOUBLE_QUOTED = r'"(?:[^"\\\n]|\\.)*"'
_SINGLE_QUOTED = r"'(?:[^'\\\n]|\\.)*'"
_NUMBER = r"\b\d+(?:\.\d+)?\b"


def _words(words: list[str]) -> str:
    return r"\b(?:" + "|".join(words) + r")\b"


def _grammar(
    *,
    comment: str,
    string: str,
    keywords: list[str],
    literals: list[str],
    types: list[str] | None = None,
) -> re.Pattern[str]:
    parts = [
        f"(?P<comment>{comment})",
        f"(?P<string>{string})",
        f"(?P<keyword>{_words(keywords)})",
    ]
    if types:
        parts.append(f"(?P<type>{_words(types)})")
    parts.append(f"(?P<literal>{_words(literals)})")
    parts.append(f"(?P<number>{_NUMBER})")
    return re.compile("|".join(parts))


_JS_KEYWORDS = [
    "const",
    "let",
    "var",
    "function",
    "return",
    "if",
    "else",
    "for",
    "while",
    "do",
    "switch",
    "case",
    "break",
    "continue",
    "class",
    "extends",
    "new",
    "this",
    "import",
    "export",
    "from",
    "default",
    "async",
    "await",
    "try",
    "catch",
    "finally",
    "throw",
    "typeof",
    "instanceof",
]
_JS_LITERALS = ["true", "false", "null", "undefined"]
_JS_COMMENT = r"//[^\n]*|/\*[\s\S]*?\*/"
_JS_STRING = rf"{_DOUBLE_QUOTED}|{_SINGLE_QUOTED}|`(?:[^`\\]|\\.)*`"

_JAVASCRIPT = _grammar(
    comment=_JS_COMMENT,
    string=_JS_STRING,
    keywords=_JS_KEYWORDS,
    literals=_JS_LITERALS,
)

_TYPESCRIPT = _grammar(
    comment=_JS_COMMENT,
    string=_JS_STRING,
    keywords=_JS_KEYWORDS + ["interface", "type", "enum", "implements", "readonly"],
    literals=_JS_LITERALS,
    types=["string", "number", "boolean", "object", "any", "unknown", "void", "never"],
)

_PYTHON = _grammar(
    comment=r"#[^\n]*",
    string=rf'"""[\s\S]*?"""|\'\'\'[\s\S]*?\'\'\'|{_DOUBLE_QUOTED}|{_SINGLE_QUOTED}',
    keywords=[
        "def",
        "class",
        "return",
        "if",
        "elif",
        "else",
        "for",
        "while",
        "in",
        "is",
        "not",
        "and",
        "or",
        "import",
        "from",
        "as",
        "try",
        "except",
        "finally",
        "raise",
        "with",
        "lambda",
        "yield",
        "pass",
        "break",
        "continue",
        "async",
        "await",
        "global",
        "nonlocal",
        "del",
        "assert",
    ],
    literals=["True", "False", "None"],
)

_JSON = re.compile(
    "|".join(
        [
            rf"(?P<key>{_DOUBLE_QUOTED}(?=\s*:))",
            f"(?P<string>{_DOUBLE_QUOTED})",
            rf"(?P<literal>{_words(['true', 'false', 'null'])})",
            r"(?P<number>-?\b\d+(?:\.\d+)?(?:[eE][+-]?\d+)?\b)",
        ]
    )
)

GRAMMARS: dict[str, re.Pattern[str]] = {
    "javascript": _JAVASCRIPT,
    "typescript": _TYPESCRIPT,
    "python": _PYTHON,
    "json": _JSON,
}

ALIASES = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
}


def normalize_language(language: str | None) -> str | None:
    """Map a fence language tag to a grammar name, if one exists."""
    if not language:
        return None
    name = language.strip().lower()
    name = ALIASES.get(name, name)
    return name if name in GRAMMARS else None


def highlight(code: str, language: str | None) -> tuple[CodeToken, ...] | None:
    """Tokenize code for the given language.

    Returns None when the language is missing or unsupported, which tells
    output targets to show the code as plain text.
    """
    name = normalize_language(language)
    if name is None:
        return None

    grammar = GRAMMARS[name]
    tokens: list[CodeToken] = []
    position = 0
    for match in grammar.finditer(code):
        if match.start() == match.end():
            continue
        if match.start() > position:
            tokens.append(CodeToken(text=code[position : match.start()]))
        tokens.append(CodeToken(kind=TokenKind(match.lastgroup), text=match.group()))
        position = match.end()
    if position < len(code):
        tokens.append(CodeToken(text=code[position:]))
    return tuple(tokens)
