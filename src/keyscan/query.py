"""
Path query parser.

A query is similar to a jq path: ``.a.b.c``. Segments containing dots or
whitespace can be double quoted, e.g. ``.a."b.b".c``. A bare ``.`` selects
the root.
"""

import re
from typing import List

from .errors import ParseError

# Characters that terminate an unquoted key
_KEY = re.compile(r'[^"\n\t .]+')


def _quoted_key(text: str, pos: int) -> tuple[str, int]:
    end = text.find('"', pos + 1)
    if end == -1:
        raise ParseError("unterminated quoted key", text[pos:])
    return text[pos + 1:end], end + 1


def _key(text: str, pos: int) -> tuple[str, int]:
    if pos < len(text) and text[pos] == '"':
        return _quoted_key(text, pos)
    match = _KEY.match(text, pos)
    if match is None:
        raise ParseError("expected a key", text[pos:])
    return match.group(), match.end()


def parse_query(text: str) -> List[str]:
    """
    Parse a path query into its key segments.

    Raises ParseError if the whole input is not a single path expression.
    """
    if not text.startswith("."):
        raise ParseError("query must start with '.'", text)

    segments: List[str] = []
    pos = 1
    if pos == len(text):
        return segments

    while True:
        segment, pos = _key(text, pos)
        segments.append(segment)
        if pos == len(text):
            return segments
        if text[pos] != ".":
            raise ParseError("unexpected trailing input", text[pos:])
        pos += 1


def format_key(key: str) -> str:
    """Render a single key for display, quoting it if it contains a dot."""
    if "." in key:
        return f'"{key}"'
    return key


def format_path(keys) -> str:
    return "".join(f".{format_key(k)}" for k in keys)
