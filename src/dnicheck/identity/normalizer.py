"""
Text normalization for identity matching.

Names coming from identity registries are uppercase and unaccented, while
people type them in any case and with accents. ``canon`` reduces both sides
to one comparable form.

Examples:
    " José   Luís " → "JOSE LUIS"
    "peña"          → "PENA"
"""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE = re.compile(r"\s+")

# Combining Diacritical Marks block
_COMBINING_MARKS = re.compile("[\u0300-\u036f]")


def collapse_whitespace(value: object) -> str:
    """Trim and collapse internal whitespace runs to a single space."""
    if value is None:
        return ""
    return _WHITESPACE.sub(" ", str(value)).strip()


def canon(value: object) -> str:
    """
    Canonical form of a free-text identity field.

    Trims, collapses whitespace, decomposes accented characters, strips the
    combining marks and uppercases. Never raises: if decomposition fails the
    trimmed text is simply uppercased.
    """
    trimmed = collapse_whitespace(value)
    try:
        decomposed = unicodedata.normalize("NFD", trimmed)
    except (TypeError, ValueError):
        return trimmed.upper()
    return _COMBINING_MARKS.sub("", decomposed).upper()
