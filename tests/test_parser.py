"""Tests for pattern compilation."""

import pytest

from segmatch.engine.models import (
    LiteralToken,
    ParameterToken,
    RestParameterToken,
    TokenType,
    TypedLiteralToken,
)
from segmatch.engine.parser import cache_info, clear_cache, compile_pattern
from segmatch.errors import PatternParseError, ValidationError


def test_literal_with_single_trailing_space_gets_optional_separator() -> None:
    tokens = compile_pattern("hello <name:text>")
    assert tokens == (
        LiteralToken("hello"),
        LiteralToken(" ", optional=True),
        ParameterToken("name", "text"),
    )


def test_two_trailing_spaces_stay_a_hard_literal() -> None:
    assert compile_pattern("ping  <x>") == (LiteralToken("ping  "), ParameterToken("x"))


def test_lone_space_literal_is_only_the_optional_separator() -> None:
    assert compile_pattern("<a> <b>") == (
        ParameterToken("a"),
        LiteralToken(" ", optional=True),
        ParameterToken("b"),
    )


def test_plain_literal() -> None:
    assert compile_pattern("status") == (LiteralToken("status"),)


def test_empty_pattern_compiles_to_nothing() -> None:
    assert compile_pattern("") == ()


@pytest.mark.parametrize(
    "pattern,expected",
    [
        ("{face:1}", TypedLiteralToken("face", "1")),
        ("{face}", TypedLiteralToken("face", "")),
        ("{image:https://x.test/a.png}", TypedLiteralToken("image", "https://x.test/a.png")),
        ("{ text : hi }", TypedLiteralToken("text", "hi")),
    ],
)
def test_typed_literals(pattern: str, expected: TypedLiteralToken) -> None:
    assert compile_pattern(pattern) == (expected,)


@pytest.mark.parametrize(
    "pattern,expected",
    [
        ("<name>", ParameterToken("name", "text")),
        ("<name:>", ParameterToken("name", "text")),
        ("<age:integer>", ParameterToken("age", "integer")),
        ("[name]", ParameterToken("name", "text", optional=True)),
        ("[pic:image]", ParameterToken("pic", "image", optional=True)),
        ("[count:number=5]", ParameterToken("count", "number", optional=True, default=5)),
        ("[rate:float=1.5]", ParameterToken("rate", "float", optional=True, default=1.5)),
        ("[on:boolean=false]", ParameterToken("on", "boolean", optional=True, default=False)),
        ("[who=world]", ParameterToken("who", "text", optional=True, default="world")),
        ("[...rest]", RestParameterToken("rest")),
        ("[...rest:]", RestParameterToken("rest")),
        ("[...faces:face]", RestParameterToken("faces", "face")),
    ],
)
def test_parameters(pattern: str, expected) -> None:
    assert compile_pattern(pattern) == (expected,)


def test_structured_default_with_nested_brackets() -> None:
    (token,) = compile_pattern("[opts:object={ids:[1, 2], name:\"x\"}]")
    assert token.default == {"ids": [1, 2], "name": "x"}
    (token,) = compile_pattern("[items:list=[1, [2, 3]]]")
    assert token.default == [1, [2, 3]]


def test_default_keeps_colons_after_the_type() -> None:
    (token,) = compile_pattern("[url:text=http://x.test:8080/]")
    assert token.data_type == "text"
    assert token.default == "http://x.test:8080/"


def test_mixed_pattern_token_types() -> None:
    tokens = compile_pattern("test{face:1}<arg:text>[opt:number=2][...rest:face]")
    assert [token.token_type for token in tokens] == [
        TokenType.LITERAL,
        TokenType.TYPED_LITERAL,
        TokenType.PARAMETER,
        TokenType.PARAMETER,
        TokenType.REST_PARAMETER,
    ]


class TestParseErrors:
    @pytest.mark.parametrize(
        "pattern,position",
        [
            ("hello <name", 6),
            ("{face:1", 0),
            ("a [b:number=[1]", 2),
        ],
    )
    def test_unbalanced_opening_bracket(self, pattern: str, position: int) -> None:
        with pytest.raises(PatternParseError) as info:
            compile_pattern(pattern)
        assert info.value.position == position
        assert info.value.pattern == pattern
        assert info.value.code == "PATTERN_PARSE_ERROR"

    def test_stray_closing_bracket(self) -> None:
        with pytest.raises(PatternParseError) as info:
            compile_pattern("a]b")
        assert info.value.position == 1

    @pytest.mark.parametrize("pattern", ["<:text>", "[]", "[=5]", "[...]", "{:1}", "{}"])
    def test_missing_names(self, pattern: str) -> None:
        with pytest.raises(PatternParseError):
            compile_pattern(pattern)

    def test_non_string_pattern(self) -> None:
        with pytest.raises(ValidationError):
            compile_pattern(None)  # type: ignore[arg-type]


def test_compile_is_cached_and_deterministic() -> None:
    first = compile_pattern("hello <name>")
    second = compile_pattern("hello <name>")
    assert first == second
    assert first is second
    assert cache_info().hits >= 1
    clear_cache()
    assert cache_info().currsize == 0
    assert compile_pattern("hello <name>") == first
