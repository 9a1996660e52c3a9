"""Configuration for pattern compilation and ranking."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from regex_specificity.syntax.parser import DEFAULT_NEST_LIMIT

MAX_NEST_LIMIT = 200

FLAG_NAMES: dict[str, re.RegexFlag] = {
    "ASCII": re.ASCII,
    "IGNORECASE": re.IGNORECASE,
    "MULTILINE": re.MULTILINE,
    "DOTALL": re.DOTALL,
    "VERBOSE": re.VERBOSE,
    "UNICODE": re.UNICODE,
    "A": re.ASCII,
    "I": re.IGNORECASE,
    "M": re.MULTILINE,
    "S": re.DOTALL,
    "X": re.VERBOSE,
    "U": re.UNICODE,
}


def parse_flags(names: str | list[str] | tuple[str, ...] | None) -> re.RegexFlag:
    """Combine flag names such as ``"IGNORECASE"`` or ``"i"`` into a flag value.

    Parameters
    ----------
    names : str | list[str] | tuple[str, ...] | None
        Names, or one comma separated string of names. Case-insensitive.

    Returns
    -------
    re.RegexFlag

    Raises
    ------
    ValueError
        If a name is not a supported flag.
    """
    if names is None:
        return re.NOFLAG
    if isinstance(names, str):
        names = names.split(",")
    flags = re.NOFLAG
    for name in names:
        key = name.strip().upper()
        if not key:
            continue
        if key not in FLAG_NAMES:
            available = ", ".join(sorted(n for n in FLAG_NAMES if len(n) > 1))
            msg = f"Unknown flag {name!r}. Available: {available}"
            raise ValueError(msg)
        flags |= FLAG_NAMES[key]
    return flags


@dataclass
class CompilerConfig:
    """Pattern compiler settings.

    Parameters
    ----------
    nest_limit : int
        Maximum group nesting depth accepted by the compiler.
    flags : list[str]
        Flag names applied to every compiled pattern.
    """

    nest_limit: int = DEFAULT_NEST_LIMIT
    flags: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 < self.nest_limit <= MAX_NEST_LIMIT:
            msg = f"nest_limit must be between 1 and {MAX_NEST_LIMIT}, got {self.nest_limit}"
            raise ValueError(msg)
        parse_flags(self.flags)

    @property
    def regex_flags(self) -> re.RegexFlag:
        """Configured flags as a ``re.RegexFlag``."""
        return parse_flags(self.flags)


@dataclass
class RankingConfig:
    """Ranking settings.

    Parameters
    ----------
    skip_invalid : bool
        Drop patterns that fail to compile instead of raising.
    """

    skip_invalid: bool = True


@dataclass
class SpecificityConfig:
    """Top-level configuration.

    Parameters
    ----------
    compiler : CompilerConfig
        Pattern compiler settings.
    ranking : RankingConfig
        Ranking settings.
    """

    compiler: CompilerConfig = field(default_factory=CompilerConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)


def load_config(source: str | Path | dict[str, Any] | SpecificityConfig | None = None) -> SpecificityConfig:
    """Load a SpecificityConfig from a YAML file, dict, or environment variables.

    Environment variables ``REGEX_SPECIFICITY_NEST_LIMIT`` and
    ``REGEX_SPECIFICITY_FLAGS`` (comma separated) override file values.

    Parameters
    ----------
    source : str | Path | dict | SpecificityConfig | None
        A path to a YAML file, a raw dict, an existing config (returned
        unchanged), or ``None`` to use only environment variable overrides
        on defaults.

    Returns
    -------
    SpecificityConfig
    """
    if isinstance(source, SpecificityConfig):
        return source

    raw: dict[str, Any] = {}

    if isinstance(source, dict):
        raw = source
    elif source is not None:
        path = Path(source)
        if path.is_file():
            raw = _load_yaml(path)

    compiler_raw = raw.get("compiler", {}) or {}
    env_flags = os.environ.get("REGEX_SPECIFICITY_FLAGS")
    flags = compiler_raw.get("flags", [])
    if env_flags is not None:
        flags = [name.strip() for name in env_flags.split(",") if name.strip()]
    elif isinstance(flags, str):
        flags = [name.strip() for name in flags.split(",") if name.strip()]

    compiler = CompilerConfig(
        nest_limit=int(os.environ.get("REGEX_SPECIFICITY_NEST_LIMIT", compiler_raw.get("nest_limit", DEFAULT_NEST_LIMIT))),
        flags=list(flags),
    )

    ranking_raw = raw.get("ranking", {}) or {}
    ranking = RankingConfig(skip_invalid=bool(ranking_raw.get("skip_invalid", True)))

    return SpecificityConfig(compiler=compiler, ranking=ranking)


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load YAML file using PyYAML."""
    with open(path, encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}
