"""Helpers for reading values written inside pattern strings."""
from __future__ import annotations

import json
import re
from typing import Any

_NUMBER_RE = re.compile(r"-?[0-9]+(?:\.[0-9]+)?")
_BARE_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_][A-Za-z0-9_]*)(\s*):")


def trim(text: str) -> str:
    """Strip ASCII whitespace and control characters from both ends."""
    start, end = 0, len(text)
    while start < end and text[start] <= " ":
        start += 1
    while end > start and text[end - 1] <= " ":
        end -= 1
    return text[start:end]


def split_once(text: str, delimiter: str) -> tuple[str, str | None]:
    """Split on the first ``delimiter``; the second part is None when absent.

    Examples:
        >>> split_once("image:https://x/a.png", ":")
        ('image', 'https://x/a.png')
        >>> split_once("name", ":")
        ('name', None)
    """
    index = text.find(delimiter)
    if index == -1:
        return text, None
    return text[:index], text[index + len(delimiter):]


def _parse_structured(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass
    # second chance: quote bare object keys, {id:1} -> {"id":1}
    return json.loads(_BARE_KEY_RE.sub(r'\1"\2"\3:', text))


def parse_literal_value(text: str) -> Any:
    """Parse a default value written in a pattern.

    Tries, in order: a JSON object or array (bare keys are tolerated), a
    number, ``true``/``false``. Anything else is returned as the trimmed
    string.

    Examples:
        >>> parse_literal_value("{id:1}")
        {'id': 1}
        >>> parse_literal_value("[1, 2]")
        [1, 2]
        >>> parse_literal_value("42")
        42
        >>> parse_literal_value("-0.5")
        -0.5
        >>> parse_literal_value("true")
        True
        >>> parse_literal_value(" hello ")
        'hello'
    """
    trimmed = trim(text)
    if (trimmed.startswith("{") and trimmed.endswith("}")) or (
        trimmed.startswith("[") and trimmed.endswith("]")
    ):
        try:
            return _parse_structured(trimmed)
        except json.JSONDecodeError:
            return trimmed
    if _NUMBER_RE.fullmatch(trimmed):
        return int(trimmed) if "." not in trimmed else float(trimmed)
    if trimmed == "true":
        return True
    if trimmed == "false":
        return False
    return trimmed
