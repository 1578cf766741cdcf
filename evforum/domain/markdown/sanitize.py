"""URL policy for link targets and image sources."""

import re
from urllib.parse import urlsplit

ALLOWED_SCHEMES = frozenset({"http", "https", "mailto"})

# Browsers ignore ASCII control characters and whitespace inside a scheme,
# so "java\tscript:" must be judged as "javascript:".
_IGNORED_IN_SCHEME = re.compile(r"[\x00-\x20\x7f]+")


def safe_url(url: str) -> str | None:
    """Return the URL if it may be embedded in an href/src, else None.

    Allows http(s) and mailto URLs plus scheme-less relative references
    (paths, fragments, queries). Everything else, notably javascript:,
    data: and vbscript:, is rejected.
    """
    candidate = url.strip()
    if not candidate:
        return None

    compact = _IGNORED_IN_SCHEME.sub("", candidate)
    try:
        scheme = urlsplit(compact).scheme.lower()
    except ValueError:
        return None

    if not scheme:
        # "//host/path" inherits the page scheme, which is http(s)
        return candidate
    if scheme in ALLOWED_SCHEMES:
        return candidate
    return None
