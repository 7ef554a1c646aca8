"""Compile pattern strings into token sequences.

Pattern syntax::

    hello              literal text
    {face:1}           typed literal: segment kind and expected value
    <name:type>        required parameter, type defaults to text
    [name:type=dflt]   optional parameter with an optional default
    [...name:type]     rest parameter, type filter is optional

A literal ending in exactly one space is followed by an optional
single-space token, so ``"ping <x>"`` matches both ``"ping 1"`` and
``"ping1"``.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from ..errors import PatternParseError, ValidationError
from .models import (
    TEXT,
    LiteralToken,
    ParameterToken,
    PatternToken,
    RestParameterToken,
    TypedLiteralToken,
)
from .utils import parse_literal_value, split_once, trim

logger = logging.getLogger(__name__)

_CLOSERS = {"{": "}", "<": ">", "[": "]"}
_STRAY = frozenset(_CLOSERS.values())
REST_PREFIX = "..."


class _PatternScanner:
    __slots__ = ("pattern", "position", "tokens")

    def __init__(self, pattern: str) -> None:
        self.pattern = pattern
        self.position = 0
        self.tokens: list[PatternToken] = []

    def run(self) -> list[PatternToken]:
        pattern = self.pattern
        while self.position < len(pattern):
            char = pattern[self.position]
            if char in _CLOSERS:
                end = self._find_closing(self.position)
                content = pattern[self.position + 1:end - 1]
                if char == "{":
                    self.tokens.append(self._typed_literal(content))
                elif char == "<":
                    self.tokens.append(self._required_parameter(content))
                else:
                    self.tokens.append(self._optional_parameter(content))
                self.position = end
            else:
                self._literal()
        return self.tokens

    def _find_closing(self, start: int) -> int:
        """Return the index just past the bracket closing the one at ``start``."""
        open_char = self.pattern[start]
        close_char = _CLOSERS[open_char]
        depth = 0
        for index in range(start, len(self.pattern)):
            char = self.pattern[index]
            if char == open_char:
                depth += 1
            elif char == close_char:
                depth -= 1
                if depth == 0:
                    return index + 1
        raise PatternParseError(
            f"Unmatched opening bracket {open_char!r} at position {start}", self.pattern, start
        )

    def _fail(self, message: str) -> PatternParseError:
        return PatternParseError(f"{message} at position {self.position}", self.pattern, self.position)

    def _literal(self) -> None:
        pattern = self.pattern
        start = self.position
        end = start
        while end < len(pattern) and pattern[end] not in _CLOSERS:
            if pattern[end] in _STRAY:
                self.position = end
                raise self._fail(f"Unmatched closing bracket {pattern[end]!r}")
            end += 1
        literal = pattern[start:end]
        self.position = end
        if literal.endswith(" ") and not literal.endswith("  "):
            if len(literal) > 1:
                self.tokens.append(LiteralToken(literal[:-1]))
            self.tokens.append(LiteralToken(" ", optional=True))
        else:
            self.tokens.append(LiteralToken(literal))

    def _typed_literal(self, content: str) -> TypedLiteralToken:
        kind, value = split_once(content, ":")
        kind = trim(kind)
        if not kind:
            raise self._fail("Typed literal without a segment type")
        return TypedLiteralToken(kind, trim(value) if value is not None else "")

    def _parameter_head(self, text: str) -> tuple[str, str | None]:
        name, data_type = split_once(text, ":")
        name = trim(name)
        if not name:
            raise self._fail("Parameter without a name")
        return name, trim(data_type) if data_type is not None else None

    def _required_parameter(self, content: str) -> ParameterToken:
        name, data_type = self._parameter_head(content)
        return ParameterToken(name, data_type or TEXT)

    def _optional_parameter(self, content: str) -> PatternToken:
        if content.startswith(REST_PREFIX):
            name, data_type = self._parameter_head(content[len(REST_PREFIX):])
            return RestParameterToken(name, data_type or None)
        head, default = split_once(content, "=")
        name, data_type = self._parameter_head(head)
        if default is None:
            return ParameterToken(name, data_type or TEXT, optional=True)
        return ParameterToken(name, data_type or TEXT, optional=True, default=parse_literal_value(default))


@lru_cache(maxsize=4096)
def _compile_cached(pattern: str) -> tuple[PatternToken, ...]:
    logger.debug("compiling pattern %r", pattern)
    scanner = _PatternScanner(pattern)
    try:
        return tuple(scanner.run())
    except PatternParseError:
        raise
    except Exception as exc:
        raise PatternParseError(
            f"Failed to parse pattern: {exc}", pattern, scanner.position
        ) from exc


def compile_pattern(pattern: str) -> tuple[PatternToken, ...]:
    """Compile ``pattern`` into its token sequence.

    Results are cached by pattern string; the same tuple is returned for
    repeated calls.

    Raises:
        ValidationError: ``pattern`` is not a string.
        PatternParseError: ``pattern`` is malformed.
    """
    if not isinstance(pattern, str):
        raise ValidationError("pattern must be a string", "pattern", pattern)
    return _compile_cached(pattern)


def clear_cache() -> None:
    _compile_cached.cache_clear()


def cache_info():
    return _compile_cached.cache_info()
