"""Terminal column width of text."""

import unicodedata


def column_width(text: str) -> int:
    """Number of columns ``text`` takes, counting wide characters as two."""
    return sum(2 if unicodedata.east_asian_width(char) in ("W", "F") else 1 for char in text)