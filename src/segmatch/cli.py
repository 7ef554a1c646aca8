"""Command line interface for compiling and matching segment patterns."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from . import __version__, io
from .engine.explain import explain_result, explain_tokens
from .engine.matcher import match
from .engine.parser import compile_pattern
from .errors import SegmatchError

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="segmatch", description="Segment pattern matching CLI")
    parser.add_argument("-V", "--version", action="version", version=f"segmatch {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", default=False, help="log debug output to stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    compile_cmd = sub.add_parser("compile", help="print the tokens of a pattern")
    compile_cmd.add_argument("pattern")
    compile_cmd.add_argument("--format", choices=["text", "json"], default="text")
    compile_cmd.add_argument("--out", default="-")

    match_cmd = sub.add_parser("match", help="match a pattern against segments")
    match_cmd.add_argument("pattern")
    match_cmd.add_argument("--segments", required=True, help="JSON or JSONL file of segments, '-' for stdin")
    match_cmd.add_argument("--mapping", help="JSON file of field mapping overrides")
    match_cmd.add_argument("--format", choices=["text", "json"], default="text")
    match_cmd.add_argument("--out", default="-")

    explain = sub.add_parser("explain", help="describe a pattern in words")
    explain.add_argument("pattern")
    return parser


def _emit_output(data: object, fmt: str, out_path: str) -> None:
    if fmt == "json":
        io.write_json(data, out_path)
    else:
        text = data if isinstance(data, str) else json.dumps(data, indent=2, sort_keys=True, default=str)
        io.write_text(text + ("\n" if not text.endswith("\n") else ""), out_path)


def _command_compile(args: argparse.Namespace) -> int:
    tokens = compile_pattern(args.pattern)
    if args.format == "json":
        io.write_json([token.to_dict() for token in tokens], args.out)
    else:
        _emit_output("\n".join(json.dumps(token.to_dict(), default=str) for token in tokens), "text", args.out)
    return 0


def _command_match(args: argparse.Namespace) -> int:
    segments = io.read_segments(args.segments)
    mapping = io.read_field_mapping(args.mapping) if args.mapping else None
    result = match(args.pattern, segments, mapping)
    if args.format == "json":
        payload = {"match": False} if result is None else {"match": True, **result.to_dict()}
        _emit_output(payload, "json", args.out)
    else:
        _emit_output(explain_result(result), "text", args.out)
    return 0 if result is not None else 1


def _command_explain(args: argparse.Namespace) -> int:
    tokens = compile_pattern(args.pattern)
    io.write_text(f"PATTERN: {args.pattern}\n{explain_tokens(tokens)}\n", "-")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    command = args.command
    try:
        if command == "compile":
            return _command_compile(args)
        if command == "match":
            return _command_match(args)
        if command == "explain":
            return _command_explain(args)
    except (SegmatchError, ValueError, OSError) as exc:
        logger.debug("command %s failed", command, exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 2
    parser.error(f"unknown command {command}")
    return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
