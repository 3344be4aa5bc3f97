from __future__ import annotations

import re
from typing import Any

"""Value normalization used for header and name comparison.

normalize() turns any cell value into a comparison key:
lowercase, non-ASCII period glyphs unified to '.', everything outside
[a-z0-9 .] removed, whitespace runs collapsed, ends trimmed.

Whitespace is collapsed after removal so that stripping a character never
leaves a double or trailing space behind; this keeps the function idempotent.

The whitespace class is Unicode aware: no-break (U+00A0) and ideographic
(U+3000) spaces survive removal and collapse to one ASCII space.
"""

__all__ = [
    "normalize",
    "PERIOD_GLYPHS",
]

# Full-width full stop, ideographic full stop, katakana middle dot
PERIOD_GLYPHS = ("．", "。", "・")

_DISALLOWED = re.compile(r"[^a-z0-9\s.]")
_WHITESPACE = re.compile(r"\s+")


def normalize(value: Any) -> str:
    """Return the comparison key for a cell value. Never raises.

    >>> normalize("  John   O'Neil．Jr")
    'john oneil.jr'
    >>> normalize(None)
    ''
    >>> normalize("I.C. No.")
    'i.c. no.'
    """
    if value is None:
        return ""
    text = str(value).lower()
    for glyph in PERIOD_GLYPHS:
        text = text.replace(glyph, ".")
    text = _DISALLOWED.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()
