"""Exception types raised by segmatch."""
from __future__ import annotations

from typing import Any


class SegmatchError(ValueError):
    """Base class for every error raised by segmatch.

    ``code`` is a stable identifier for the error family and ``details``
    carries the context needed to locate the problem.
    """

    def __init__(self, message: str, code: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class PatternParseError(SegmatchError):
    """A pattern string could not be compiled."""

    def __init__(self, message: str, pattern: str | None = None, position: int | None = None) -> None:
        super().__init__(message, "PATTERN_PARSE_ERROR", {"pattern": pattern, "position": position})

    @property
    def pattern(self) -> str | None:
        return self.details.get("pattern")

    @property
    def position(self) -> int | None:
        return self.details.get("position")


class ValidationError(SegmatchError):
    """A caller passed an argument of the wrong shape."""

    def __init__(self, message: str, field: str | None = None, value: Any = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", {"field": field, "value": value})


class MatchError(SegmatchError):
    """A handler chain failed while processing a match."""

    def __init__(self, message: str, pattern: str | None = None, segments: list[Any] | None = None) -> None:
        super().__init__(message, "MATCH_ERROR", {"pattern": pattern, "segments": segments})
