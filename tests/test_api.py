"""Tests for the package-level entry points."""

import logging
import re

import pytest

from regex_specificity import PatternSyntaxError, ScoreResult, compile_pattern, evaluate, get
from regex_specificity.config import SpecificityConfig
from regex_specificity.models import Literal


def test_monotonicity_under_certainty():
    """An exact literal is more specific than a wildcard."""
    assert get("abc", "abc") > get("abc", ".*")


def test_exact_values():
    assert get("abc", "abc") == 196608
    assert get("abc", ".*") == 4


def test_degenerate_equality():
    """A greedy leading wildcard consumes everything, leaving nothing for the rest."""
    assert get("cat", ".*") == get("cat", ".*a.*")


def test_branch_penalty():
    assert get("a", "(a|b)") == get("a", "a") // 2


def test_empty_target_and_pattern():
    assert evaluate("", "") == ScoreResult(0, 0)
    assert get("", "") == 0


def test_evaluate_reports_consumed_bytes():
    assert evaluate("héllo", "h.llo").consumed == len("héllo".encode())


def test_determinism():
    pattern = r"alice@(myprovider|other)\.com"
    assert get("alice@myprovider.com", pattern) == get("alice@myprovider.com", pattern)


@pytest.mark.parametrize(
    ("target", "pattern"),
    [
        ("abc", "xyz"),
        ("", "abc"),
        ("abc", ""),
        ("abc", "^$"),
        ("a", "(?:b|c)+"),
        ("\ud800", "."),
    ],
)
def test_mismatching_pairs_still_score(target, pattern):
    """Mismatched inputs give a number, never an error."""
    assert get(target, pattern) >= 0


def test_syntax_error_propagates():
    with pytest.raises(PatternSyntaxError) as excinfo:
        get("abc", "(abc")
    assert isinstance(excinfo.value, re.error)


def test_flags_argument():
    """Case-insensitive literals score as two-member classes."""
    assert get("A", "a", flags=re.IGNORECASE) == 65536 >> 2


def test_config_flags():
    assert get("A", "a", config={"compiler": {"flags": ["i"]}}) == get("A", "a", flags=re.IGNORECASE)


def test_config_nest_limit():
    with pytest.raises(PatternSyntaxError, match="nests too deeply"):
        get("a", "((a))", config={"compiler": {"nest_limit": 1}})


def test_config_object_accepted():
    config = SpecificityConfig()
    assert get("abc", "abc", config=config) == 196608


def test_compile_pattern_logs(caplog):
    with caplog.at_level(logging.DEBUG, logger="regex_specificity.api"):
        tree = compile_pattern("abc")
    assert tree == Literal(b"abc")
    assert "Compiled pattern 'abc'" in caplog.text


@pytest.mark.parametrize(
    ("spelled", "plain"),
    [
        ("a(?:bc.)", "abc."),
        ("a(?>bc.)", "abc."),
        ("a(?i:bc.)", "a[Bb][Cc]."),
        ("a{1}bcd", "abcd"),
        ("ax{0}bcd", "abcd"),
    ],
)
def test_equivalent_spellings_score_the_same(spelled, plain):
    assert get("abcd", spelled) == get("abcd", plain)


def test_group_body_literal_joins_preceding_literal():
    """Three literal bytes at full weight, then a dot at decayed weight."""
    assert get("abcd", "a(?:bc.)") == 3 * 65536 + ((65536 - 3 * 128) >> 15)
