"""Markdown rendering pipeline.

`render` turns raw user text into structured nodes; `to_html` and
`to_plain_text` turn those nodes into output. Parsing and output never
depend on each other beyond the node types.
"""

from evforum.domain.markdown.blocks import render
from evforum.domain.markdown.html_output import to_html
from evforum.domain.markdown.sanitize import safe_url
from evforum.domain.markdown.text_output import to_plain_text

__all__ = ["render", "safe_url", "to_html", "to_plain_text"]
