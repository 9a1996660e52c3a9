"""Shared fixtures for specificity tests."""

import pytest

EMAIL = "alice@myprovider.com"


@pytest.fixture()
def email_target():
    """Target string used by the ranking scenario."""
    return EMAIL


@pytest.fixture()
def email_patterns():
    """Candidate patterns that all fully match ``EMAIL`` (except the empty ones)."""
    return [
        "alice@myprovider.com",
        "^alice@myprovider.com$",
        "alice@myprovider.co.",
        ".lice@myprovider.com",
        r"alice@myprovider\.[a-z]+",
        r"alice@myprovider\..+",
        ".*",
        r"alice@(myprovider|other)\.com",
        "",
        "^$",
    ]


@pytest.fixture()
def suite_file(tmp_path, email_patterns):
    """Ranking suite YAML written to a temporary directory."""
    lines = [f"target: '{EMAIL}'", "patterns:"]
    lines.extend(f"  - '{pattern}'" for pattern in email_patterns)
    path = tmp_path / "suite.yaml"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    """Keep configuration environment overrides out of every test."""
    monkeypatch.delenv("REGEX_SPECIFICITY_NEST_LIMIT", raising=False)
    monkeypatch.delenv("REGEX_SPECIFICITY_FLAGS", raising=False)
