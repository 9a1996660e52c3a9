"""Heuristic specificity scores for regular expressions against the strings they match."""

from regex_specificity.adapter import regex_specificity_get
from regex_specificity.api import compile_pattern, evaluate, get
from regex_specificity.config import SpecificityConfig, load_config
from regex_specificity.errors import InvalidEncoding, PatternSyntaxError
from regex_specificity.models import (
    Alternation,
    Assertion,
    AssertionKind,
    Capture,
    CharClass,
    Empty,
    Literal,
    PatternNode,
    Repetition,
    ScoreResult,
    Sequence,
)
from regex_specificity.ranking import RankedPattern, load_suite, rank, render_table
from regex_specificity.score import WEIGHT, score

__all__ = [
    "Alternation",
    "Assertion",
    "AssertionKind",
    "Capture",
    "CharClass",
    "Empty",
    "InvalidEncoding",
    "Literal",
    "PatternNode",
    "PatternSyntaxError",
    "RankedPattern",
    "Repetition",
    "ScoreResult",
    "Sequence",
    "SpecificityConfig",
    "WEIGHT",
    "compile_pattern",
    "evaluate",
    "get",
    "load_config",
    "load_suite",
    "rank",
    "regex_specificity_get",
    "render_table",
    "score",
]
