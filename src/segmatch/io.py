"""Input/output helpers for the segmatch CLI."""
from __future__ import annotations

import json
import os
import sys
from collections.abc import Iterable
from typing import Any, TextIO

from .engine.models import Segment


def _read_jsonl(handle: TextIO) -> list[Any]:
    records: list[Any] = []
    for raw in handle:
        raw = raw.strip()
        if not raw:
            continue
        records.append(json.loads(raw))
    return records


def _read_json(handle: TextIO) -> list[Any]:
    payload = json.load(handle)
    if isinstance(payload, dict) and "segments" in payload:
        payload = payload["segments"]
    if isinstance(payload, dict):
        return [payload]
    if not isinstance(payload, list):
        raise ValueError("segments file must hold a list of segments or an object with a 'segments' key")
    return payload


def _open_records(path: str) -> Iterable[Any]:
    if path == "-":
        return _read_json(sys.stdin)
    _, ext = os.path.splitext(path)
    with open(path, encoding="utf-8") as handle:
        if ext.lower() == ".jsonl":
            return _read_jsonl(handle)
        return _read_json(handle)


def read_segments(path: str) -> list[Segment]:
    """Load segments from a JSON array, a ``{"segments": [...]}`` object, or JSONL."""
    return [Segment.from_dict(record) for record in _open_records(path)]


def read_field_mapping(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError("field mapping file must hold a JSON object")
    return payload


def write_json(obj: Any, path: str) -> None:
    if path == "-":
        json.dump(obj, sys.stdout, indent=2, sort_keys=True, default=str)
        sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        json.dump(obj, handle, indent=2, sort_keys=True, default=str)
        handle.write("\n")


def write_text(text: str, path: str) -> None:
    if path == "-":
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()
        return
    with open(path, "w", encoding="utf-8") as handle:
        handle.write(text)
