"""Tests for segment and mapping file helpers."""

import json
from pathlib import Path

import pytest

from segmatch import io


def test_read_segments_json_array(tmp_path: Path) -> None:
    path = tmp_path / "segments.json"
    path.write_text(json.dumps([{"type": "text", "data": {"text": "hi"}}, {"kind": "face", "fields": {"id": 1}}]))
    segments = io.read_segments(str(path))
    assert [segment.to_dict() for segment in segments] == [
        {"type": "text", "data": {"text": "hi"}},
        {"type": "face", "data": {"id": 1}},
    ]


def test_read_segments_single_object(tmp_path: Path) -> None:
    path = tmp_path / "segment.json"
    path.write_text(json.dumps({"type": "face", "data": {"id": 2}}))
    assert [segment.kind for segment in io.read_segments(str(path))] == ["face"]


def test_read_segments_jsonl_skips_blank_lines(tmp_path: Path) -> None:
    path = tmp_path / "segments.JSONL"
    path.write_text('{"type": "text", "data": {"text": "a"}}\n\n{"type": "text", "data": {"text": "b"}}\n')
    assert [segment.text for segment in io.read_segments(str(path))] == ["a", "b"]


def test_read_segments_rejects_scalars(tmp_path: Path) -> None:
    path = tmp_path / "segments.json"
    path.write_text("3")
    with pytest.raises(ValueError):
        io.read_segments(str(path))


def test_read_field_mapping(tmp_path: Path) -> None:
    path = tmp_path / "mapping.json"
    path.write_text(json.dumps({"image": ["src", "url"]}))
    assert io.read_field_mapping(str(path)) == {"image": ["src", "url"]}
    path.write_text("[]")
    with pytest.raises(ValueError):
        io.read_field_mapping(str(path))


def test_write_helpers(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "out.json"
    io.write_json({"b": 1, "a": [1]}, str(target))
    assert json.loads(target.read_text()) == {"a": [1], "b": 1}
    io.write_text("hello", "-")
    io.write_json({"x": 1}, "-")
    out = capsys.readouterr().out
    assert out.startswith("hello\n")
    assert json.loads(out[len("hello\n"):]) == {"x": 1}
