"""Human-readable renderings of compiled patterns and match results."""
from __future__ import annotations

import json
from collections.abc import Sequence

from .models import (
    LiteralToken,
    MatchResult,
    ParameterToken,
    PatternToken,
    RestParameterToken,
    Segment,
    TypedLiteralToken,
)


def describe_token(token: PatternToken) -> str:
    if isinstance(token, LiteralToken):
        if token.optional:
            return "optional separator space"
        return f"literal {token.text!r}"
    if isinstance(token, TypedLiteralToken):
        if not token.value:
            return f"any {token.segment_kind} segment"
        return f"{token.segment_kind} segment equal to {token.value!r}"
    if isinstance(token, ParameterToken):
        text = f"{'optional' if token.optional else 'required'} {token.data_type} parameter {token.name!r}"
        if token.has_default:
            text += f" (default {json.dumps(token.default)})"
        return text
    if isinstance(token, RestParameterToken):
        kinds = f"{token.data_type} segments" if token.data_type else "segments"
        return f"rest of the {kinds} as {token.name!r}"
    raise TypeError(f"not a pattern token: {token!r}")


def explain_tokens(tokens: Sequence[PatternToken]) -> str:
    """One numbered line per token."""
    if not tokens:
        return "(empty pattern)"
    return "\n".join(f"{index + 1:>3}. {describe_token(token)}" for index, token in enumerate(tokens))


def _segment_text(segment: Segment) -> str:
    if segment.text is not None:
        return repr(segment.text)
    return f"[{segment.kind} {json.dumps(segment.fields, sort_keys=True, default=str)}]"


def explain_result(result: MatchResult | None) -> str:
    if result is None:
        return "NO MATCH"
    lines = ["MATCH"]
    payload = result.to_dict()["params"]
    for name, value in payload.items():
        lines.append(f"  {name} = {json.dumps(value, default=str)}")
    if result.matched:
        lines.append("  matched: " + " ".join(_segment_text(segment) for segment in result.matched))
    if result.remaining:
        lines.append("  remaining: " + " ".join(_segment_text(segment) for segment in result.remaining))
    return "\n".join(lines)
