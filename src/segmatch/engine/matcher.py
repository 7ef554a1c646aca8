"""Match compiled patterns against message segments."""
from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any
from weakref import WeakKeyDictionary

from ..errors import ValidationError
from .fields import FieldMapping, extract_field_value, resolve_field_mapping
from .models import (
    TEXT,
    LiteralToken,
    MatchResult,
    ParameterToken,
    PatternToken,
    RestParameterToken,
    Segment,
    SegmentLike,
    TypedLiteralToken,
    as_segment,
)
from .parser import compile_pattern
from .tokens import SEPARATOR, split_first_word
from .type_matchers import TypeMatcherRegistry, default_registry

logger = logging.getLogger(__name__)

_kind_checks: WeakKeyDictionary[Segment, dict[str, bool]] = WeakKeyDictionary()


def is_kind(segment: Segment, kind: str | None) -> bool:
    """Memoized ``segment.kind == kind``, keyed on the segment object."""
    checks = _kind_checks.get(segment)
    if checks is None:
        checks = {}
        _kind_checks[segment] = checks
    result = checks.get(kind)
    if result is None:
        result = checks[kind] = segment.kind == kind
    return result


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if value is None:
        return "null"
    return str(value)


class SegmentCursor:
    """Read position over the working copy of the input.

    Text left over after a partial match is pushed in front of the cursor
    and becomes the next segment read; the underlying list is never
    modified. Pushed text is always shorter than the segment it came from.
    """

    __slots__ = ("_segments", "_index", "_pushed", "_blobs")

    def __init__(self, segments: list[Segment]) -> None:
        self._segments = segments
        self._index = 0
        self._pushed: list[Segment] = []
        self._blobs: set[Segment] = set()

    def current(self) -> Segment | None:
        if self._pushed:
            return self._pushed[-1]
        if self._index < len(self._segments):
            return self._segments[self._index]
        return None

    def advance(self, count: int = 1) -> None:
        for _ in range(count):
            if self._pushed:
                self._pushed.pop()
            elif self._index < len(self._segments):
                self._index += 1

    def push_front(self, segment: Segment, blob: bool = False) -> None:
        self._pushed.append(segment)
        if blob:
            self._blobs.add(segment)

    def is_blob(self, segment: Segment) -> bool:
        """True for text split off a blob that fills several parameters."""
        return segment in self._blobs

    def upcoming(self) -> Iterator[Segment]:
        yield from reversed(self._pushed)
        yield from self._segments[self._index:]

    def drain(self) -> list[Segment]:
        rest = list(self.upcoming())
        self._pushed.clear()
        self._index = len(self._segments)
        return rest


class _MatchRun:
    """State of one :func:`match` call."""

    def __init__(
        self,
        tokens: Sequence[PatternToken],
        segments: list[Segment],
        field_mapping: Mapping[str, FieldMapping],
        registry: TypeMatcherRegistry,
    ) -> None:
        self.tokens = tokens
        self.cursor = SegmentCursor(segments)
        self.field_mapping = field_mapping
        self.registry = registry
        self.result = MatchResult()
        self.token_index = 0

    def run(self) -> MatchResult | None:
        while self.token_index < len(self.tokens):
            token = self.tokens[self.token_index]
            segment = self.cursor.current()
            if segment is not None and self._match_token(token, segment):
                self.token_index += 1
                continue
            if isinstance(token, RestParameterToken):
                self.result.add_param(token.name, [])
            elif isinstance(token, ParameterToken) and token.optional:
                self.result.add_param(token.name, token.fallback_value())
            elif not token.optional:
                logger.debug("token %d (%r) did not match %r", self.token_index, token, segment)
                return None
            self.token_index += 1
        for segment in self.cursor.drain():
            self.result.add_remaining(segment)
        return self.result if self.result.is_valid() else None

    def _match_token(self, token: PatternToken, segment: Segment) -> bool:
        if isinstance(token, LiteralToken):
            return self._match_literal(token, segment)
        if isinstance(token, TypedLiteralToken):
            return self._match_typed_literal(token, segment)
        if isinstance(token, ParameterToken):
            return self._match_parameter(token, segment)
        if isinstance(token, RestParameterToken):
            return self._match_rest(token)
        return False

    def _consume(self, segment: Segment, rest: str = "", blob: bool = False) -> None:
        """Move past ``segment``; ``rest`` becomes the next segment if non-empty."""
        self.cursor.advance()
        if rest:
            self.cursor.push_front(Segment.text_segment(rest), blob=blob)

    def _match_literal(self, token: LiteralToken, segment: Segment) -> bool:
        text = segment.text
        if text is None or not text.startswith(token.text):
            return False
        self._consume(segment, text[len(token.text):], blob=self.cursor.is_blob(segment))
        self.result.add_matched(Segment.text_segment(token.text))
        return True

    def _match_typed_literal(self, token: TypedLiteralToken, segment: Segment) -> bool:
        if not is_kind(segment, token.segment_kind):
            return False
        rule = self.field_mapping.get(segment.kind)
        if rule is None:
            return False
        if not token.value:
            self._consume(segment)
            self.result.add_matched(segment)
            return True
        value = extract_field_value(segment, rule)
        if value is None:
            return False
        if _stringify(value) == token.value:
            self._consume(segment)
            self.result.add_matched(segment)
            return True
        if segment.is_text and isinstance(value, str) and token.value in value:
            before, _, after = value.partition(token.value)
            self._consume(segment, after, blob=self.cursor.is_blob(segment))
            if before:
                self.result.add_matched(Segment.text_segment(before))
            self.result.add_matched(Segment.text_segment(token.value))
            return True
        return False

    def _fills_text(self, token: PatternToken) -> bool:
        return isinstance(token, ParameterToken) and (
            token.data_type == TEXT or self.registry.has_special_matcher(token.data_type)
        )

    def _optionals_sharing_blob(self) -> int:
        """Count optional parameters, from the current token on, that would
        read from the same text segment: runs of text-like parameters joined
        only by optional separators."""
        count = 0
        for token in self.tokens[self.token_index:]:
            if isinstance(token, LiteralToken) and token.optional:
                continue
            if not self._fills_text(token):
                break
            if token.optional:
                count += 1
        return count

    def _match_parameter(self, token: ParameterToken, segment: Segment) -> bool:
        if token.data_type == TEXT or (
            segment.is_text and self.registry.has_special_matcher(token.data_type)
        ):
            return self._match_text_parameter(token, segment)
        if not is_kind(segment, token.data_type):
            return False
        rule = self.field_mapping.get(token.data_type)
        value = extract_field_value(segment, rule) if rule is not None else None
        self._consume(segment)
        self.result.add_matched(segment)
        self.result.add_param(token.name, value)
        return True

    def _match_text_parameter(self, token: ParameterToken, segment: Segment) -> bool:
        text = segment.text
        if text is None:
            return False
        candidate, consumed, tail = text, None, ""
        if self._optionals_sharing_blob() > 1:
            word, tail = split_first_word(text)
            candidate, consumed = word.value, word.raw
        elif self.cursor.is_blob(segment):
            word, rest = split_first_word(text)
            if not rest.strip(SEPARATOR):
                candidate = word.value
        if token.data_type == TEXT:
            value = candidate
        else:
            matcher = self.registry.get_matcher(token.data_type)
            coerced = matcher.match(candidate) if matcher is not None else None
            if coerced is None or not coerced.success:
                return False
            value = coerced.value
        self._consume(segment, tail, blob=True)
        self.result.add_matched(segment if consumed is None else Segment.text_segment(consumed))
        self.result.add_param(token.name, value)
        return True

    def _rest_value(self, segment: Segment, data_type: str) -> Any:
        if data_type == TEXT:
            return segment.text
        rule = self.field_mapping.get(data_type)
        if rule is None:
            return segment
        return extract_field_value(segment, rule)

    def _match_rest(self, token: RestParameterToken) -> bool:
        matched: list[Segment] = []
        values: list[Any] = []
        for segment in self.cursor.upcoming():
            if token.data_type is None:
                values.append(segment)
            elif is_kind(segment, token.data_type):
                values.append(self._rest_value(segment, token.data_type))
            elif segment.is_text and segment.fields.get("text") == SEPARATOR:
                pass
            else:
                break
            matched.append(segment)
        self.cursor.advance(len(matched))
        self.result.matched.extend(matched)
        self.result.add_param(token.name, values)
        return True


def _defaults_only(tokens: Sequence[PatternToken]) -> MatchResult:
    result = MatchResult()
    for token in tokens:
        if isinstance(token, RestParameterToken):
            result.add_param(token.name, [])
        elif isinstance(token, ParameterToken):
            result.add_param(token.name, token.fallback_value())
    return result


def match(
    tokens: Sequence[PatternToken] | str,
    segments: Sequence[SegmentLike],
    field_mapping: Mapping[str, FieldMapping] | None = None,
    *,
    registry: TypeMatcherRegistry | None = None,
) -> MatchResult | None:
    """Match ``segments`` against a compiled pattern.

    Args:
        tokens: Compiled tokens, or a pattern string to compile first.
        segments: :class:`Segment` objects or host records; never modified.
        field_mapping: Per-kind field rules merged over the defaults.
        registry: Type matchers for typed parameters; defaults to the shared
            registry.

    Returns:
        The match result, or None when a required token could not be
        satisfied.

    Raises:
        ValidationError: ``segments`` is not a list or tuple, a segment record
            is malformed, or ``field_mapping`` is invalid.
    """
    if isinstance(tokens, str):
        tokens = compile_pattern(tokens)
    if not isinstance(tokens, (list, tuple)):
        raise ValidationError("tokens must be a sequence of pattern tokens", "tokens", tokens)
    if not isinstance(segments, (list, tuple)):
        raise ValidationError("segments must be a list of message segments", "segments", segments)
    mapping = resolve_field_mapping(field_mapping)
    working = [as_segment(segment).clone() for segment in segments]

    if not tokens:
        return MatchResult(remaining=working)
    if not working:
        if all(token.optional or isinstance(token, RestParameterToken) for token in tokens):
            return _defaults_only(tokens)
        return None
    return _MatchRun(tokens, working, mapping, registry or default_registry).run()
