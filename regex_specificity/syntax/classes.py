"""Range arithmetic and predefined tables for character classes."""

from __future__ import annotations

from functools import lru_cache
from itertools import groupby
from typing import Callable, Iterable

Ranges = tuple[tuple[int, int], ...]

MAX_CODEPOINT = 0x10FFFF
MAX_BYTE = 0xFF

# Classes at least this large already reach the maximum shift when scored,
# so case folding them would not change their score.
FOLD_LIMIT = 1 << 14


def normalize(ranges: Iterable[tuple[int, int]]) -> Ranges:
    """Sort *ranges* and merge overlapping or adjacent pairs."""
    merged: list[list[int]] = []
    for start, end in sorted(ranges):
        if merged and start <= merged[-1][1] + 1:
            merged[-1][1] = max(merged[-1][1], end)
        else:
            merged.append([start, end])
    return tuple((start, end) for start, end in merged)


def negate(ranges: Ranges, upper: int = MAX_CODEPOINT) -> Ranges:
    """Complement normalized *ranges* within ``[0, upper]``."""
    result: list[tuple[int, int]] = []
    cursor = 0
    for start, end in ranges:
        if start > upper:
            break
        if start > cursor:
            result.append((cursor, start - 1))
        cursor = max(cursor, end + 1)
    if cursor <= upper:
        result.append((cursor, upper))
    return tuple(result)


def clip(ranges: Ranges, upper: int) -> Ranges:
    """Drop everything above *upper* from normalized *ranges*."""
    return tuple((start, min(end, upper)) for start, end in ranges if start <= upper)


def size(ranges: Ranges) -> int:
    return sum(end - start + 1 for start, end in ranges)


def case_variants(char: str, ascii_only: bool = False) -> set[str]:
    """Return *char* together with its single-character case variants."""
    if ascii_only:
        if char.isascii() and char.isalpha():
            return {char.lower(), char.upper()}
        return {char}
    variants = {char}
    for candidate in (char.lower(), char.upper(), char.swapcase(), char.casefold()):
        if len(candidate) == 1:
            variants.add(candidate)
    return variants


def fold_case(ranges: Ranges, ascii_only: bool = False) -> Ranges:
    """Extend *ranges* with the case variants of every member."""
    if size(ranges) >= FOLD_LIMIT:
        return ranges
    extra: list[tuple[int, int]] = list(ranges)
    for start, end in ranges:
        for codepoint in range(start, end + 1):
            for variant in case_variants(chr(codepoint), ascii_only):
                extra.append((ord(variant), ord(variant)))
    return normalize(extra)


def _collect(predicate: Callable[[str], bool], upper: int = MAX_CODEPOINT) -> Ranges:
    """Build ranges from every codepoint up to *upper* satisfying *predicate*."""
    result: list[tuple[int, int]] = []
    for matched, run in groupby(range(upper + 1), key=lambda cp: predicate(chr(cp))):
        if matched:
            members = list(run)
            result.append((members[0], members[-1]))
    return tuple(result)


@lru_cache(maxsize=None)
def digit(ascii_only: bool = False) -> Ranges:
    """Ranges for ``\\d``."""
    if ascii_only:
        return ((0x30, 0x39),)
    return _collect(str.isdecimal)


@lru_cache(maxsize=None)
def word(ascii_only: bool = False) -> Ranges:
    """Ranges for ``\\w``."""
    if ascii_only:
        return ((0x30, 0x39), (0x41, 0x5A), (0x5F, 0x5F), (0x61, 0x7A))
    return _collect(lambda char: char.isalnum() or char == "_")


@lru_cache(maxsize=None)
def space(ascii_only: bool = False) -> Ranges:
    """Ranges for ``\\s``."""
    if ascii_only:
        return ((0x09, 0x0D), (0x20, 0x20))
    return _collect(str.isspace)


def dot(dotall: bool = False, upper: int = MAX_CODEPOINT) -> Ranges:
    """Ranges for ``.``: everything, or everything but newline."""
    if dotall:
        return ((0, upper),)
    return ((0, 0x09), (0x0B, upper))
