"""segmatch: compile command patterns and match them against message segments."""
from __future__ import annotations

from collections.abc import Sequence

from .commander import Commander, match_pattern
from .engine.matcher import match
from .engine.models import MatchOptions, MatchResult, Segment
from .engine.parser import compile_pattern
from .engine.type_matchers import register_matcher
from .errors import MatchError, PatternParseError, SegmatchError, ValidationError

__version__ = "0.1.0"


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point mirroring :func:`segmatch.cli.main`."""

    from .cli import main as cli_main

    return cli_main(argv)


__all__ = [
    "Commander",
    "MatchError",
    "MatchOptions",
    "MatchResult",
    "PatternParseError",
    "Segment",
    "SegmatchError",
    "ValidationError",
    "compile_pattern",
    "main",
    "match",
    "match_pattern",
    "register_matcher",
]
