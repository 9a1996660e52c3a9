"""Command line interface: ``regex-specificity score`` and ``regex-specificity rank``."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from regex_specificity.api import get
from regex_specificity.config import load_config, parse_flags
from regex_specificity.errors import PatternSyntaxError
from regex_specificity.ranking import load_suite, rank, rank_suite, render_table

EXIT_SYNTAX_ERROR = 2


def _add_score(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("score", help="Print the specificity of one pattern against a target")
    parser.add_argument("target", help="String the pattern fully matches")
    parser.add_argument("pattern", help="Regular expression in Python re syntax")
    parser.add_argument("--flags", type=str, default=None, help="Comma-separated flags, e.g. 'i,m'")


def _add_rank(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("rank", help="Rank candidate patterns against a target")
    parser.add_argument("target", nargs="?", default=None, help="String every pattern fully matches")
    parser.add_argument("patterns", nargs="*", help="Candidate patterns")
    parser.add_argument("--suite", type=Path, default=None, help="YAML file with target, patterns and flags")
    parser.add_argument("--flags", type=str, default=None, help="Comma-separated flags, e.g. 'i,m'")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="regex-specificity", description="Score how specifically a regex matches a string")
    parser.add_argument("--config", type=Path, default=None, help="YAML configuration file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_score(subparsers)
    _add_rank(subparsers)
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = load_config(args.config)
    try:
        flags = parse_flags(args.flags)
    except ValueError as exc:
        parser.error(str(exc))

    if args.command == "score":
        try:
            value = get(args.target, args.pattern, flags=flags, config=config)
        except PatternSyntaxError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_SYNTAX_ERROR
        print(value)
        return 0

    if args.suite is not None:
        if args.target is not None:
            parser.error("rank takes either --suite or TARGET PATTERN..., not both")
        if args.flags is not None:
            parser.error("rank --suite reads flags from the suite file, not --flags")
        suite = load_suite(args.suite)
        target = suite.target
        results = rank_suite(suite, config=config)
    else:
        if args.target is None:
            parser.error("rank requires TARGET and PATTERN arguments or --suite")
        target = args.target
        results = rank(target, args.patterns, flags=flags, config=config)

    sys.stdout.write(render_table(target, results))
    return 0


if __name__ == "__main__":
    sys.exit(main())
