"""Run handler chains over pattern matches."""
from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable

from .engine.fields import FieldMapping, validate_field_mapping
from .engine.matcher import match
from .engine.models import MatchOptions, MatchResult, PatternToken, SegmentLike
from .engine.parser import compile_pattern
from .engine.type_matchers import TypeMatcherRegistry
from .errors import MatchError, ValidationError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]


class Commander:
    """A compiled pattern plus the handlers to run on each message.

    The first handler receives ``(params, *remaining)`` on a match, or no
    arguments when the message does not match. Every later handler receives
    the previous handler's return value. The chain's final value is
    returned wrapped in a list.

    >>> cmd = Commander("echo <msg:text>").action(lambda params: params["msg"].upper())
    >>> cmd.match([{"type": "text", "data": {"text": "echo hi"}}])
    ['HI']
    """

    def __init__(
        self,
        pattern: str,
        field_mapping: Mapping[str, FieldMapping] | None = None,
        *,
        registry: TypeMatcherRegistry | None = None,
    ) -> None:
        if not isinstance(pattern, str) or not pattern.strip():
            raise ValidationError("pattern must be a non-empty string", "pattern", pattern)
        if field_mapping is not None:
            validate_field_mapping(field_mapping)
        self.pattern = pattern
        self.options = MatchOptions(field_mapping=field_mapping, registry=registry)
        self._tokens = compile_pattern(pattern)
        self._handlers: list[Handler] = []

    @property
    def tokens(self) -> tuple[PatternToken, ...]:
        return self._tokens

    def action(self, handler: Handler) -> Commander:
        if not callable(handler):
            raise ValidationError("handler must be callable", "handler", handler)
        self._handlers.append(handler)
        return self

    def match_result(self, segments: Sequence[SegmentLike]) -> MatchResult | None:
        return match(
            self._tokens, segments, self.options.field_mapping, registry=self.options.registry
        )

    def _initial_args(self, segments: Sequence[SegmentLike]) -> list[Any]:
        result = self.match_result(segments)
        if result is None:
            logger.debug("pattern %r did not match", self.pattern)
            return []
        return [result.params, *result.remaining]

    def match(self, segments: Sequence[SegmentLike]) -> list[Any]:
        values = self._initial_args(segments)
        for handler in self._handlers:
            value = handler(*values)
            if inspect.isawaitable(value):
                if inspect.iscoroutine(value):
                    value.close()
                raise MatchError(
                    f"handler {getattr(handler, '__name__', handler)!r} returned an awaitable; "
                    "use match_async",
                    self.pattern,
                    list(segments),
                )
            values = [value]
        return values

    async def match_async(self, segments: Sequence[SegmentLike]) -> list[Any]:
        values = self._initial_args(segments)
        for handler in self._handlers:
            value = handler(*values)
            if inspect.isawaitable(value):
                value = await value
            values = [value]
        return values

    def __repr__(self) -> str:
        return f"Commander({self.pattern!r}, handlers={len(self._handlers)})"


def match_pattern(
    pattern: str, field_mapping: Mapping[str, FieldMapping] | None = None
) -> Commander:
    """Shorthand for :class:`Commander`."""
    return Commander(pattern, field_mapping)
