"""Lenient JSON parsing for configuration and command output."""

from __future__ import annotations

import json
import re
from typing import Any

_TOKENS = re.compile(r'"(?:\\.|[^"\\])*"|//[^\n]*|/\*.*?\*/', re.DOTALL)
_DECODER_ERROR = "Syntax error: special float values are not allowed"


def _strip_comments(text: str) -> str:
    return _TOKENS.sub(lambda m: m.group() if m.group().startswith('"') else " ", text)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{_DECODER_ERROR}: {name}")


_DECODER = json.JSONDecoder(parse_constant=_reject_constant)


def parse_json(data: str) -> Any:
    """Parse ``data`` as JSON, allowing comments and ignoring trailing text.

    An empty string yields an empty object. Raises ValueError on bad input.
    """
    if not data:
        return {}
    text = _strip_comments(data)
    start = len(text) - len(text.lstrip())
    try:
        value, _ = _DECODER.raw_decode(text, start)
    except ValueError as exc:
        raise ValueError(str(exc)) from exc
    return value