"""Text utilities shared by the renderer and the document builders.

Design principles:
- Table cells and short-summary slots fit on one line
- Truncation is always marked with an ellipsis
- Helpers are pure and never fail on empty input
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

_SPACES = re.compile(r"\s+")

ELLIPSIS = "..."

# Words kept lowercase in headings
_HEADER_LOWERCASE = frozenset({"as", "for"})

# Characters not allowed in a single logical path segment
_INVALID_SEGMENT_CHARS = re.compile(r'[\x00-\x1f"*:?\\|]')


def collapse_spaces(text: str) -> str:
    """Collapse every whitespace run (including newlines) to a single space."""
    return _SPACES.sub(" ", text)


def summarize(text: str, max_length: int = 100) -> str:
    """Flatten to a single line and truncate to max_length with an ellipsis.

    Examples:
        "Makes a sound." -> "Makes a sound." (unchanged)
        "x" * 120 -> "xxx...xxx..." (97 chars + "...")
    """
    text = text.replace("\r", " ").replace("\n", " ")
    if len(text) > max_length:
        keep = max(max_length - len(ELLIPSIS), 0)
        text = text[:keep] + ELLIPSIS
    return text


def to_snake_case(text: str) -> str:
    """Insert underscores at lower-to-upper boundaries and lowercase.

    Examples:
        StaticMethods -> static_methods
        HTTPClient -> httpclient
    """
    out: list[str] = []
    for i, ch in enumerate(text):
        if i > 0 and text[i - 1].islower() and ch.isupper():
            out.append("_")
        out.append(ch.lower())
    return "".join(out)


def to_header_string(text: str) -> str:
    """Turn an identifier into a title-cased heading.

    Examples:
        StaticMethods -> Static Methods
        convertForDisplay -> Convert for Display
    """

    def capitalize(word: str) -> str:
        if word in _HEADER_LOWERCASE:
            return word
        return word[:1].upper() + word[1:]

    return " ".join(capitalize(w) for w in to_snake_case(text).split("_"))


def sanitize_path(path: str) -> str:
    """Make a logical output path safe for any downstream writer.

    Angle brackets from generic display names become square brackets,
    spaces are dropped, and characters illegal in file names become '_'.
    """
    path = path.replace("\\<", "[").replace("<", "[").replace(">", "]").replace(" ", "")
    parts = [_INVALID_SEGMENT_CHARS.sub("_", part) for part in PurePosixPath(path).parts]
    return str(PurePosixPath(*parts)) if parts else ""
