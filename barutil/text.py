"""Whitespace trimming helpers."""

WHITESPACE = " \n\r\t\f\v"


def ltrim(s: str) -> str:
    """Remove leading ASCII whitespace."""
    return s.lstrip(WHITESPACE)


def rtrim(s: str) -> str:
    """Remove trailing ASCII whitespace."""
    return s.rstrip(WHITESPACE)


def trim(s: str) -> str:
    """Remove leading and trailing ASCII whitespace."""
    return rtrim(ltrim(s))