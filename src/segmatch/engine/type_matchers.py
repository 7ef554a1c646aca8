"""Validators and converters for primitive parameter types."""
from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any, NamedTuple, Protocol

from .models import TEXT


class TypeMatch(NamedTuple):
    success: bool
    value: Any = None


NO_MATCH = TypeMatch(False)


class TypeMatcher(Protocol):
    def match(self, text: str) -> TypeMatch:
        ...


class RegexTypeMatcher:
    """Accepts text that fully matches ``regex`` and converts it with ``convert``."""

    __slots__ = ("regex", "convert")

    def __init__(self, regex: str, convert) -> None:
        self.regex = re.compile(regex)
        self.convert = convert

    def match(self, text: str) -> TypeMatch:
        if not isinstance(text, str) or self.regex.fullmatch(text) is None:
            return NO_MATCH
        return TypeMatch(True, self.convert(text))

    def __repr__(self) -> str:  # pragma: no cover - debug convenience
        return f"{type(self).__name__}({self.regex.pattern!r})"


def _to_number(text: str) -> int | float:
    return int(text) if "." not in text else float(text)


class NumberTypeMatcher(RegexTypeMatcher):
    """Integers and decimals: ``123``, ``-3.14``, ``0.5``."""

    def __init__(self) -> None:
        super().__init__(r"[-+]?[0-9]+(?:\.[0-9]+)?", _to_number)


class IntegerTypeMatcher(RegexTypeMatcher):
    """Signed integers only: ``123``, ``0``, ``-5``, ``+7``."""

    def __init__(self) -> None:
        super().__init__(r"[-+]?[0-9]+", int)


class FloatTypeMatcher(RegexTypeMatcher):
    """Decimals with a mandatory fractional part: ``1.0``, ``-3.14``."""

    def __init__(self) -> None:
        super().__init__(r"[-+]?[0-9]+\.[0-9]+", float)


class BooleanTypeMatcher(RegexTypeMatcher):
    def __init__(self) -> None:
        super().__init__(r"true|false", lambda text: text == "true")


class TextTypeMatcher:
    def match(self, text: str) -> TypeMatch:
        return TypeMatch(True, text)


class TypeMatcherRegistry:
    """Lookup table of type matchers keyed by type name.

    ``text`` is registered like any other type but is never reported as a
    special matcher: the matching engine reads text parameters directly.
    """

    def __init__(self, matchers: Iterable[tuple[str, TypeMatcher]] | None = None) -> None:
        self._matchers: dict[str, TypeMatcher] = dict(matchers or ())

    @classmethod
    def with_builtins(cls) -> TypeMatcherRegistry:
        return cls(
            [
                ("number", NumberTypeMatcher()),
                ("integer", IntegerTypeMatcher()),
                ("float", FloatTypeMatcher()),
                ("boolean", BooleanTypeMatcher()),
                (TEXT, TextTypeMatcher()),
            ]
        )

    def get_matcher(self, type_name: str | None) -> TypeMatcher | None:
        if type_name is None:
            return None
        return self._matchers.get(type_name)

    def has_special_matcher(self, type_name: str | None) -> bool:
        return type_name != TEXT and type_name in self._matchers

    def register(self, type_name: str, matcher: TypeMatcher) -> None:
        if not callable(getattr(matcher, "match", None)):
            raise TypeError(f"matcher for {type_name!r} must define match(text)")
        self._matchers[type_name] = matcher

    def unregister(self, type_name: str) -> None:
        self._matchers.pop(type_name, None)

    def supported_types(self) -> list[str]:
        return list(self._matchers)

    def copy(self) -> TypeMatcherRegistry:
        return TypeMatcherRegistry(self._matchers.items())


default_registry = TypeMatcherRegistry.with_builtins()


def get_matcher(type_name: str) -> TypeMatcher | None:
    return default_registry.get_matcher(type_name)


def has_special_matcher(type_name: str) -> bool:
    return default_registry.has_special_matcher(type_name)


def register_matcher(type_name: str, matcher: TypeMatcher) -> None:
    default_registry.register(type_name, matcher)
