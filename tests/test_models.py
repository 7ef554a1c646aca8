"""Tests for segment, token and result models."""

import copy

import pytest

from segmatch.engine.models import (
    NO_DEFAULT,
    LiteralToken,
    MatchOptions,
    MatchResult,
    ParameterToken,
    RestParameterToken,
    Segment,
    TypedLiteralToken,
    as_segment,
)
from segmatch.errors import ValidationError


class TestSegment:
    @pytest.mark.parametrize(
        "record",
        [
            {"kind": "face", "fields": {"id": 1}},
            {"type": "face", "data": {"id": 1}},
            {"type": {"name": "face"}, "data": {"id": 1}},
        ],
    )
    def test_from_dict_shapes(self, record: dict) -> None:
        seg = Segment.from_dict(record)
        assert seg.kind == "face"
        assert seg.fields == {"id": 1}

    def test_missing_data_is_empty(self) -> None:
        assert Segment.from_dict({"type": "face"}).fields == {}
        assert Segment.from_dict({"type": "face", "data": None}).fields == {}

    @pytest.mark.parametrize(
        "record",
        [[], {"data": {}}, {"type": 3}, {"type": "face", "data": [1]}],
    )
    def test_from_dict_rejects(self, record) -> None:
        with pytest.raises(ValidationError):
            Segment.from_dict(record)

    def test_text_helpers(self) -> None:
        seg = Segment.text_segment("hi")
        assert seg.is_text and seg.text == "hi"
        assert Segment("face", {"text": "hi"}).text is None
        assert Segment("text", {"text": 3}).text is None

    def test_identity_semantics_and_clone(self) -> None:
        seg = Segment("image", {"meta": {"w": 1}})
        twin = seg.clone()
        assert twin is not seg and twin != seg
        assert twin.to_dict() == seg.to_dict()
        twin.fields["meta"]["w"] = 2
        assert seg.fields["meta"]["w"] == 1

    def test_as_segment(self) -> None:
        seg = Segment("face", {"id": 1})
        assert as_segment(seg) is seg
        assert as_segment({"type": "face", "data": {"id": 1}}).to_dict() == seg.to_dict()


class TestTokens:
    def test_to_dict(self) -> None:
        assert LiteralToken(" ", optional=True).to_dict() == {"type": "literal", "value": " ", "optional": True}
        assert TypedLiteralToken("face", "1").to_dict() == {
            "type": "typed_literal",
            "segment_type": "face",
            "value": "1",
        }
        assert ParameterToken("n", "number", True, 5).to_dict() == {
            "type": "parameter",
            "name": "n",
            "data_type": "number",
            "optional": True,
            "default": 5,
        }
        assert "default" not in ParameterToken("n").to_dict()
        assert RestParameterToken("r").to_dict() == {"type": "rest_parameter", "name": "r", "data_type": None}

    def test_fallback_values(self) -> None:
        assert ParameterToken("a", optional=True).fallback_value() == ""
        assert ParameterToken("a", "face", optional=True).fallback_value() is None
        assert ParameterToken("a", "number", optional=True, default=0).fallback_value() == 0
        assert not ParameterToken("a").has_default

    def test_no_default_survives_copy(self) -> None:
        assert copy.deepcopy(NO_DEFAULT) is NO_DEFAULT
        assert repr(NO_DEFAULT) == "NO_DEFAULT"

    def test_tokens_are_frozen(self) -> None:
        token = ParameterToken("a")
        with pytest.raises(AttributeError):
            token.name = "b"  # type: ignore[misc]


class TestMatchResult:
    def test_validity(self) -> None:
        result = MatchResult()
        assert not result.is_valid()
        result.add_remaining(Segment.text_segment("x"))
        assert not result.is_valid()
        result.add_param("a", None)
        assert result.is_valid() and result.has_param("a")
        other = MatchResult()
        other.add_matched(Segment.text_segment("x"))
        assert other.is_valid()

    def test_to_dict_serializes_nested_segments(self) -> None:
        result = MatchResult(params={"items": [Segment("face", {"id": 1})], "n": 2})
        assert result.to_dict() == {
            "matched": [],
            "params": {"items": [{"type": "face", "data": {"id": 1}}], "n": 2},
            "remaining": [],
        }


def test_match_options_defaults() -> None:
    options = MatchOptions()
    assert options.field_mapping is None and options.registry is None
