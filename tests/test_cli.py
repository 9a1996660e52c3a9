"""Tests for the command line interface."""

import pytest

from regex_specificity.cli import EXIT_SYNTAX_ERROR, build_parser, main
from regex_specificity.errors import PatternSyntaxError


def test_score(capsys):
    assert main(["score", "abc", "abc"]) == 0
    assert capsys.readouterr().out == "196608\n"


def test_score_with_flags(capsys):
    assert main(["score", "A", "a", "--flags", "i"]) == 0
    assert capsys.readouterr().out == "16384\n"


def test_score_syntax_error(capsys):
    assert main(["score", "abc", "(abc"]) == EXIT_SYNTAX_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("error: missing ), unterminated subpattern")


def test_unknown_flag_exits(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["score", "a", "a", "--flags", "shout"])
    assert excinfo.value.code == 2
    assert "Unknown flag" in capsys.readouterr().err


def test_rank(capsys):
    assert main(["rank", "ab", ".*", "ab", "("]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "Target String: 'ab'"
    assert lines[4].startswith("│ 131072 ")
    assert lines[5].startswith("│ 3 ")
    assert len(lines) == 7


def test_rank_suite(capsys, suite_file):
    assert main(["rank", "--suite", str(suite_file)]) == 0
    out = capsys.readouterr().out
    assert out.startswith("Target String: 'alice@myprovider.com'\n")
    assert "│ 1238908    │ ^alice@myprovider.com$" in out


def test_rank_with_config(capsys, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("ranking:\n  skip_invalid: false\n", encoding="utf-8")
    with pytest.raises(PatternSyntaxError, match="unterminated subpattern"):
        main(["--config", str(config), "rank", "ab", "("])


def test_rank_requires_input():
    with pytest.raises(SystemExit):
        main(["rank"])


def test_rank_rejects_suite_and_target(suite_file):
    with pytest.raises(SystemExit):
        main(["rank", "abc", "--suite", str(suite_file)])


def test_parser_requires_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_rank_rejects_suite_and_flags(capsys, suite_file):
    with pytest.raises(SystemExit) as excinfo:
        main(["rank", "--suite", str(suite_file), "--flags", "i"])
    assert excinfo.value.code == 2
    assert "reads flags from the suite file" in capsys.readouterr().err
