"""Field mapping rules: where to read a segment's value from."""
from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Union

from ..errors import ValidationError
from .models import Segment

logger = logging.getLogger(__name__)

FieldExtractor = Callable[[Segment], Any]
FieldMapping = Union[str, Sequence[str], FieldExtractor]

DEFAULT_FIELD_MAPPING: dict[str, FieldMapping] = {
    "text": "text",
    "face": "id",
    "image": ("file", "url", "path"),
    "at": "user_id",
}


def extract_field_value(segment: Segment, mapping: FieldMapping) -> Any:
    """Read a value from ``segment`` following ``mapping``.

    Args:
        segment: Segment to read from.
        mapping: A field name, an ordered sequence of field names (the first
            field holding a non-None value wins), or a callable receiving the
            segment.

    Returns:
        The extracted value, or None when nothing could be extracted. Errors
        raised by a callable mapping are treated as None.

    Examples:
        >>> seg = Segment("image", {"url": "http://x/a.png"})
        >>> extract_field_value(seg, ["src", "file", "url"])
        'http://x/a.png'
        >>> extract_field_value(seg, "file") is None
        True
    """
    if isinstance(mapping, str):
        return segment.fields.get(mapping)
    if callable(mapping):
        try:
            return mapping(segment)
        except Exception:  # noqa: BLE001 - extractor failures mean "no value"
            logger.debug("field extractor failed for %s segment", segment.kind, exc_info=True)
            return None
    if isinstance(mapping, Sequence):
        for name in mapping:
            value = segment.fields.get(name)
            if value is not None:
                return value
        return None
    raise ValidationError(f"unsupported field mapping: {mapping!r}", "mapping", mapping)


def validate_field_mapping(mapping: Any) -> None:
    if not isinstance(mapping, Mapping):
        raise ValidationError("field mapping must be a mapping of kind to rule", "field_mapping", mapping)
    for kind, rule in mapping.items():
        if not isinstance(kind, str):
            raise ValidationError("field mapping keys must be segment kinds", "field_mapping", kind)
        if isinstance(rule, str) or callable(rule):
            continue
        if isinstance(rule, Sequence) and all(isinstance(name, str) for name in rule):
            continue
        raise ValidationError(f"invalid field mapping rule for {kind!r}", kind, rule)


def resolve_field_mapping(overrides: Mapping[str, FieldMapping] | None = None) -> dict[str, FieldMapping]:
    """Merge caller rules over :data:`DEFAULT_FIELD_MAPPING`, per kind.

    Examples:
        >>> resolve_field_mapping({"image": "src"})["image"]
        'src'
        >>> resolve_field_mapping({"image": "src"})["face"]
        'id'
    """
    resolved = dict(DEFAULT_FIELD_MAPPING)
    if overrides is None:
        return resolved
    validate_field_mapping(overrides)
    resolved.update(overrides)
    return resolved
