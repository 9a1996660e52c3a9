"""Tests for ranking, table rendering, and suite loading."""

import logging

import pytest

from regex_specificity.errors import PatternSyntaxError
from regex_specificity.ranking import RankedPattern, load_suite, rank, rank_suite, render_table

EXPECTED_EMAIL_RANKING = [
    ("^alice@myprovider.com$", 1238908),
    ("alice@myprovider.com", 1238657),
    ("alice@myprovider.co.", 1175298),
    (".lice@myprovider.com", 1171203),
    (r"alice@myprovider\.[a-z]+", 1120040),
    (r"alice@myprovider\..+", 1114115),
    (r"alice@(myprovider|other)\.com", 971008),
    ("^$", 256),
    (".*", 21),
    ("", 0),
]


def test_email_ranking(email_target, email_patterns):
    """Full ranking of the demo scenario, most specific first."""
    results = rank(email_target, email_patterns)
    assert [(r.pattern, r.score) for r in results] == EXPECTED_EMAIL_RANKING


def test_email_ranking_shape(email_target, email_patterns):
    """Exact literals lead and the empty-ish patterns trail."""
    results = rank(email_target, email_patterns)
    top = {r.pattern for r in results[:2]}
    bottom = [r.pattern for r in results[-3:]]
    assert top == {"alice@myprovider.com", "^alice@myprovider.com$"}
    assert bottom == ["^$", ".*", ""]


def test_ties_keep_input_order():
    assert [r.pattern for r in rank("abc", ["abc", "(?:abc)", "a(?:b)c"])] == ["abc", "(?:abc)", "a(?:b)c"]
    assert [r.pattern for r in rank("abc", ["a(?:b)c", "abc"])] == ["a(?:b)c", "abc"]


def test_invalid_patterns_skipped(caplog):
    with caplog.at_level(logging.WARNING, logger="regex_specificity.ranking"):
        results = rank("a", ["a", "(", "."])
    assert [r.pattern for r in results] == ["a", "."]
    assert "Skipping pattern '('" in caplog.text


def test_invalid_patterns_raise_when_not_skipped():
    with pytest.raises(PatternSyntaxError):
        rank("a", ["a", "("], config={"ranking": {"skip_invalid": False}})


def test_rank_accepts_generators():
    results = rank("ab", (p for p in ["a.", "ab"]))
    assert [r.pattern for r in results] == ["ab", "a."]


def test_render_table():
    table = render_table("ab", [RankedPattern("ab", 131072), RankedPattern(".*", 3)])
    expected = (
        "Target String: 'ab'\n"
        "┌" + "─" * 12 + "┬" + "─" * 40 + "┐\n"
        "│ " + "Result".ljust(10) + " │ " + "Pattern".ljust(38) + " │\n"
        "├" + "─" * 12 + "┼" + "─" * 40 + "┤\n"
        "│ " + "131072".ljust(10) + " │ " + "ab".ljust(38) + " │\n"
        "│ " + "3".ljust(10) + " │ " + ".*".ljust(38) + " │\n"
        "└" + "─" * 12 + "┴" + "─" * 40 + "┘\n"
    )
    assert table == expected


def test_render_empty_table():
    table = render_table("x", [])
    assert table.splitlines()[-2] == "├" + "─" * 12 + "┼" + "─" * 40 + "┤"


class TestSuites:
    def test_load_suite(self, suite_file, email_target, email_patterns):
        suite = load_suite(suite_file)
        assert suite.target == email_target
        assert suite.patterns == email_patterns
        assert suite.flags == []

    def test_rank_suite(self, suite_file):
        results = rank_suite(load_suite(suite_file))
        assert [(r.pattern, r.score) for r in results] == EXPECTED_EMAIL_RANKING

    def test_suite_flags(self, tmp_path):
        path = tmp_path / "flags.yaml"
        path.write_text("target: ABC\npatterns: [abc, ABC]\nflags: [IGNORECASE]\n", encoding="utf-8")
        suite = load_suite(path)
        assert suite.flags == ["IGNORECASE"]
        results = rank_suite(suite)
        assert results[0].score == results[1].score

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Ranking suite not found"):
            load_suite(tmp_path / "missing.yaml")

    def test_missing_target(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("patterns: [a]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="string 'target'"):
            load_suite(path)

    def test_patterns_must_be_strings(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("target: a\npatterns: [1, 2]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="list of strings"):
            load_suite(path)

    def test_unknown_flag(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("target: a\npatterns: [a]\nflags: [shout]\n", encoding="utf-8")
        with pytest.raises(ValueError, match="Unknown flag 'shout'"):
            load_suite(path)
