# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Recognizer CLI.

Usage:
    python -m recognizer.cli recognize FILE [--min-confidence N] [--format json|text] [-o PATH]
    python -m recognizer.cli -v recognize - < page.html
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from pathlib import Path

from . import logging_config
from .config import RecognizerConfig
from .engine import filter_by_confidence, recognize_document
from .errors import ConfigError, RecognizerError
from .scoring import MAX_CONFIDENCE
from .serializer import to_json, to_text

logger = logging.getLogger(__name__)


def _read_source(path_str: str) -> bytes:
    if path_str == "-":
        return sys.stdin.buffer.read()
    return Path(path_str).read_bytes()


def _write_output(text: str, path_str: str | None) -> None:
    if not path_str:
        print(text)
        return
    p = Path(path_str)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text + "\n", encoding="utf-8")
    print(f"Saved: {p}", file=sys.stderr)


def _confidence_arg(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {raw!r}") from None
    if not 0 <= value <= MAX_CONFIDENCE:
        raise argparse.ArgumentTypeError(f"must be between 0 and {MAX_CONFIDENCE}")
    return value


def cmd_recognize(args: argparse.Namespace, config: RecognizerConfig) -> None:
    if args.min_confidence is not None:
        config = dataclasses.replace(config, min_confidence=args.min_confidence)

    try:
        source = _read_source(args.file)
    except OSError as e:
        raise RecognizerError(f"cannot read {args.file}: {e.strerror or e}") from e

    records = recognize_document(source, config=config)
    accepted = filter_by_confidence(records, config.min_confidence)
    logger.debug("%d of %d components kept at min confidence %d", len(accepted), len(records), config.min_confidence)

    text = to_json(accepted) if args.format == "json" else to_text(accepted)
    _write_output(text, args.output)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Component recognition with calibrated confidence",
        prog="python -m recognizer.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _recognize_epilog = """\
examples:
  %(prog)s page.html                          JSON to stdout
  %(prog)s page.html --format text            Human-readable report
  %(prog)s page.html --min-confidence 70 -o out/result.json
  cat page.html | %(prog)s -                  Read from stdin
"""
    p_recognize = subparsers.add_parser(
        "recognize",
        help="Recognize components in an HTML file",
        epilog=_recognize_epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_recognize.add_argument("file", metavar="FILE", help="HTML file path, or - for stdin")
    p_recognize.add_argument(
        "--min-confidence",
        type=_confidence_arg,
        default=None,
        metavar="N",
        help="Drop components below N (default: RECOGNIZER_MIN_CONFIDENCE or 0)",
    )
    p_recognize.add_argument("--format", choices=["json", "text"], default="json", help="Output format")
    p_recognize.add_argument("-o", "--output", type=str, metavar="PATH", help="Write output to a file")

    commands = {"recognize": cmd_recognize}

    args = parser.parse_args(argv)

    try:
        config = RecognizerConfig.from_env()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    level = "DEBUG" if args.verbose else config.log_level
    logging_config.configure(json_output=args.json_logs or config.json_logs, level=level)

    try:
        commands[args.command](args, config)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except RecognizerError as e:
        print(f"Error: {e}", file=sys.stderr)
        if args.verbose:
            import traceback

            traceback.print_exc(file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
