"""Data models shared across the segmatch engine."""
from __future__ import annotations

import copy
import enum
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar, Union

from ..errors import ValidationError

if TYPE_CHECKING:
    from .fields import FieldMapping
    from .type_matchers import TypeMatcherRegistry

TEXT = "text"


class TokenType(str, enum.Enum):
    LITERAL = "literal"
    TYPED_LITERAL = "typed_literal"
    PARAMETER = "parameter"
    REST_PARAMETER = "rest_parameter"


class _NoDefault:
    __slots__ = ()

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __deepcopy__(self, memo: dict) -> _NoDefault:
        return self


NO_DEFAULT: Any = _NoDefault()


@dataclass(eq=False)
class Segment:
    """One unit of a structured message.

    Segments compare by identity: the engine keys per-segment caches on the
    object itself. Use :meth:`to_dict` for value comparison.
    """

    kind: str
    fields: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, record: Mapping[str, Any]) -> Segment:
        """Build a segment from a host record.

        Accepts ``{"kind": ..., "fields": ...}`` as well as the chat-protocol
        shape ``{"type": ..., "data": ...}`` where ``type`` may itself be a
        ``{"name": ...}`` object.
        """
        if not isinstance(record, Mapping):
            raise ValidationError("segment must be a mapping", "segment", record)
        if "kind" in record:
            kind = record["kind"]
            data = record.get("fields", {})
        else:
            kind = record.get("type")
            data = record.get("data", {})
        if isinstance(kind, Mapping):
            kind = kind.get("name")
        if not isinstance(kind, str):
            raise ValidationError("segment kind must be a string", "kind", kind)
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValidationError("segment fields must be a mapping", "fields", data)
        return cls(kind, dict(data))

    @classmethod
    def text_segment(cls, text: str) -> Segment:
        return cls(TEXT, {"text": text})

    @property
    def is_text(self) -> bool:
        return self.kind == TEXT

    @property
    def text(self) -> str | None:
        value = self.fields.get("text") if self.is_text else None
        return value if isinstance(value, str) else None

    def clone(self) -> Segment:
        return Segment(self.kind, copy.deepcopy(self.fields))

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.kind, "data": dict(self.fields)}


SegmentLike = Union[Segment, Mapping[str, Any]]


def as_segment(value: SegmentLike) -> Segment:
    if isinstance(value, Segment):
        return value
    return Segment.from_dict(value)


@dataclass(frozen=True)
class LiteralToken:
    text: str
    optional: bool = False

    token_type: ClassVar[TokenType] = TokenType.LITERAL

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.token_type.value, "value": self.text, "optional": self.optional}


@dataclass(frozen=True)
class TypedLiteralToken:
    segment_kind: str
    value: str = ""

    token_type: ClassVar[TokenType] = TokenType.TYPED_LITERAL
    optional: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.token_type.value, "segment_type": self.segment_kind, "value": self.value}


@dataclass(frozen=True)
class ParameterToken:
    name: str
    data_type: str = TEXT
    optional: bool = False
    default: Any = NO_DEFAULT

    token_type: ClassVar[TokenType] = TokenType.PARAMETER

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    def fallback_value(self) -> Any:
        """Value recorded when an optional parameter is not supplied."""
        if self.has_default:
            return copy.deepcopy(self.default)
        return "" if self.data_type == TEXT else None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "type": self.token_type.value,
            "name": self.name,
            "data_type": self.data_type,
            "optional": self.optional,
        }
        if self.has_default:
            payload["default"] = self.default
        return payload


@dataclass(frozen=True)
class RestParameterToken:
    name: str
    data_type: str | None = None

    token_type: ClassVar[TokenType] = TokenType.REST_PARAMETER
    optional: ClassVar[bool] = False

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.token_type.value, "name": self.name, "data_type": self.data_type}


PatternToken = Union[LiteralToken, TypedLiteralToken, ParameterToken, RestParameterToken]


@dataclass
class MatchResult:
    """Accumulates what a single :func:`match` call consumed and extracted."""

    matched: list[Segment] = field(default_factory=list)
    params: dict[str, Any] = field(default_factory=dict)
    remaining: list[Segment] = field(default_factory=list)

    def add_matched(self, segment: Segment) -> None:
        self.matched.append(segment)

    def add_param(self, name: str, value: Any) -> None:
        self.params[name] = value

    def add_remaining(self, segment: Segment) -> None:
        self.remaining.append(segment)

    def has_param(self, name: str) -> bool:
        return name in self.params

    def is_valid(self) -> bool:
        # defaults alone are enough
        return bool(self.params) or bool(self.matched)

    def to_dict(self) -> dict[str, Any]:
        return {
            "matched": [segment.to_dict() for segment in self.matched],
            "params": _jsonable(self.params),
            "remaining": [segment.to_dict() for segment in self.remaining],
        }


def _jsonable(value: Any) -> Any:
    if isinstance(value, Segment):
        return value.to_dict()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


@dataclass(frozen=True)
class MatchOptions:
    """Per-pattern matching configuration.

    field_mapping: overrides merged over the default field mapping, keyed by
        segment kind (see :mod:`segmatch.engine.fields`).
    registry: type matcher registry; ``None`` selects the shared default.
    """
    field_mapping: Mapping[str, FieldMapping] | None = None
    registry: TypeMatcherRegistry | None = None
