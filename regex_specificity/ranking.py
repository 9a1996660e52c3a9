"""Rank candidate patterns by specificity against one target string."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable

import jinja2
import yaml

from regex_specificity.api import ConfigSource, get
from regex_specificity.config import load_config, parse_flags
from regex_specificity.errors import PatternSyntaxError

logger = logging.getLogger(__name__)

RESULT_WIDTH = 12
PATTERN_WIDTH = 40

_TABLE_TEMPLATE = """\
Target String: '{{ target }}'
┌{{ "─" * result_width }}┬{{ "─" * pattern_width }}┐
│ {{ "Result".ljust(result_width - 2) }} │ {{ "Pattern".ljust(pattern_width - 2) }} │
├{{ "─" * result_width }}┼{{ "─" * pattern_width }}┤
{% for row in rows -%}
│ {{ (row.score | string).ljust(result_width - 2) }} │ {{ row.pattern.ljust(pattern_width - 2) }} │
{% endfor -%}
└{{ "─" * result_width }}┴{{ "─" * pattern_width }}┘
"""

_environment = jinja2.Environment(undefined=jinja2.StrictUndefined, keep_trailing_newline=True)


@dataclass(frozen=True)
class RankedPattern:
    """A candidate pattern with its specificity.

    Parameters
    ----------
    pattern : str
        Pattern text.
    score : int
        Specificity against the ranked target.
    """

    pattern: str
    score: int


@dataclass
class RankingSuite:
    """A target string and the candidate patterns to rank against it.

    Parameters
    ----------
    target : str
        String every candidate is expected to match.
    patterns : list[str]
        Candidate patterns in declaration order.
    flags : list[str]
        Flag names applied to every candidate.
    """

    target: str
    patterns: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)


def rank(
    target: str,
    patterns: Iterable[str],
    *,
    flags: int | re.RegexFlag = 0,
    config: ConfigSource = None,
) -> list[RankedPattern]:
    """Score every pattern against *target*, most specific first.

    Patterns with equal scores keep their input order. Patterns that fail to
    compile are skipped with a warning unless the ranking configuration sets
    ``skip_invalid`` to false.

    Parameters
    ----------
    target : str
        String every pattern is expected to fully match.
    patterns : Iterable[str]
        Candidate patterns.
    flags : int | re.RegexFlag
        Compiler flags for every candidate.
    config : str | Path | dict | SpecificityConfig | None
        Configuration source.

    Returns
    -------
    list[RankedPattern]

    Raises
    ------
    PatternSyntaxError
        If a pattern is malformed and ``skip_invalid`` is disabled.
    """
    config = load_config(config)
    results: list[RankedPattern] = []
    for pattern in patterns:
        try:
            value = get(target, pattern, flags=flags, config=config)
        except PatternSyntaxError as exc:
            if not config.ranking.skip_invalid:
                raise
            logger.warning("Skipping pattern %r: %s", pattern, exc)
            continue
        results.append(RankedPattern(pattern=pattern, score=value))

    results.sort(key=lambda ranked: ranked.score, reverse=True)
    logger.debug("Ranked %d patterns against %r", len(results), target)
    return results


def render_table(target: str, results: Iterable[RankedPattern]) -> str:
    """Render ranked results as a box-drawn text table.

    Parameters
    ----------
    target : str
        Target string shown in the heading.
    results : Iterable[RankedPattern]
        Rows in display order.

    Returns
    -------
    str
    """
    template = _environment.from_string(_TABLE_TEMPLATE)
    return template.render(
        target=target,
        rows=list(results),
        result_width=RESULT_WIDTH,
        pattern_width=PATTERN_WIDTH,
    )


def load_suite(path: str | Path) -> RankingSuite:
    """Load a ranking suite from a YAML file.

    Parameters
    ----------
    path : str | Path
        YAML file with ``target``, ``patterns`` and optional ``flags`` keys.

    Returns
    -------
    RankingSuite

    Raises
    ------
    FileNotFoundError
        If *path* does not exist.
    ValueError
        If the file lacks a string ``target`` or ``patterns`` is not a list
        of strings.
    """
    path = Path(path)
    if not path.exists():
        msg = f"Ranking suite not found: {path}"
        raise FileNotFoundError(msg)

    with open(path, encoding="utf-8") as fh:
        data: dict[str, Any] = yaml.safe_load(fh) or {}

    target = data.get("target")
    if not isinstance(target, str):
        msg = f"Ranking suite {path} must define a string 'target'"
        raise ValueError(msg)

    patterns = data.get("patterns", [])
    if not isinstance(patterns, list) or not all(isinstance(p, str) for p in patterns):
        msg = f"Ranking suite {path} must define 'patterns' as a list of strings"
        raise ValueError(msg)

    flags = data.get("flags", [])
    if isinstance(flags, str):
        flags = [flags]
    parse_flags(flags)

    logger.debug("Loaded ranking suite from %s: %d patterns", path, len(patterns))

    return RankingSuite(target=target, patterns=patterns, flags=list(flags))


def rank_suite(suite: RankingSuite, *, config: ConfigSource = None) -> list[RankedPattern]:
    """Rank the patterns of *suite* against its target."""
    return rank(suite.target, suite.patterns, flags=parse_flags(suite.flags), config=config)
