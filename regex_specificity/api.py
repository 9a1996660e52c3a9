"""Package-level entry points: get(), evaluate() and compile_pattern()."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

from regex_specificity.config import SpecificityConfig, load_config
from regex_specificity.models import PatternNode, ScoreResult
from regex_specificity.score import WEIGHT, score
from regex_specificity.syntax import compile_pattern as _compile

logger = logging.getLogger(__name__)

ConfigSource = str | Path | dict[str, Any] | SpecificityConfig | None


def compile_pattern(
    pattern: str,
    flags: int | re.RegexFlag = 0,
    *,
    config: ConfigSource = None,
) -> PatternNode:
    """Compile *pattern* into a pattern tree using configured limits and flags.

    Parameters
    ----------
    pattern : str
        Regular expression in Python ``re`` syntax.
    flags : int | re.RegexFlag
        Flags combined with those from the configuration.
    config : str | Path | dict | SpecificityConfig | None
        Configuration source, see :func:`~regex_specificity.config.load_config`.

    Returns
    -------
    PatternNode

    Raises
    ------
    PatternSyntaxError
        If *pattern* is malformed.
    """
    compiler = load_config(config).compiler
    tree = _compile(pattern, flags | compiler.regex_flags, nest_limit=compiler.nest_limit)
    logger.debug("Compiled pattern %r: %r", pattern, tree)
    return tree


def evaluate(
    target: str,
    pattern: str,
    *,
    flags: int | re.RegexFlag = 0,
    config: ConfigSource = None,
) -> ScoreResult:
    """Score *pattern* against *target* and report both contribution and bytes consumed.

    The caller guarantees that *pattern* fully matches *target*; this is not
    checked. For a mismatching pair the result is well defined but carries no
    comparative meaning.

    Parameters
    ----------
    target : str
        String the pattern is known to match.
    pattern : str
        Regular expression in Python ``re`` syntax.
    flags : int | re.RegexFlag
        Compiler flags.
    config : str | Path | dict | SpecificityConfig | None
        Configuration source.

    Returns
    -------
    ScoreResult

    Raises
    ------
    PatternSyntaxError
        If *pattern* is malformed.
    """
    tree = compile_pattern(pattern, flags, config=config)
    data = target.encode("utf-8", "surrogatepass")
    result = score(tree, data, WEIGHT)
    logger.debug(
        "Scored pattern=%r target_bytes=%d contribution=%d consumed=%d",
        pattern,
        len(data),
        result.contribution,
        result.consumed,
    )
    return result


def get(
    target: str,
    pattern: str,
    *,
    flags: int | re.RegexFlag = 0,
    config: ConfigSource = None,
) -> int:
    """Return the specificity of *pattern* against *target*.

    Higher scores mean the pattern describes *target* more precisely.

    Parameters
    ----------
    target : str
        String the pattern is known to fully match.
    pattern : str
        Regular expression in Python ``re`` syntax.
    flags : int | re.RegexFlag
        Compiler flags.
    config : str | Path | dict | SpecificityConfig | None
        Configuration source.

    Returns
    -------
    int
        Unsigned 64-bit specificity score.

    Raises
    ------
    PatternSyntaxError
        If *pattern* is malformed.

    Examples
    --------
    >>> get("abc", "abc") > get("abc", ".*")
    True
    """
    return evaluate(target, pattern, flags=flags, config=config).contribution
