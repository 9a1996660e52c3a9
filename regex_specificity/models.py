"""Pattern tree and score result models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class Empty:
    """Pattern that matches the empty string."""


@dataclass(frozen=True)
class Literal:
    """Fixed byte sequence.

    Parameters
    ----------
    value : bytes
        UTF-8 encoding of the literal text.
    """

    value: bytes


@dataclass(frozen=True)
class CharClass:
    """Set of symbols described by inclusive ranges.

    Parameters
    ----------
    ranges : tuple[tuple[int, int], ...]
        Sorted, non-overlapping ``(start, end)`` pairs. Codepoints for
        unicode classes, byte values otherwise.
    unicode : bool
        ``True`` when the class matches whole characters, ``False`` when it
        matches single bytes.
    """

    ranges: tuple[tuple[int, int], ...]
    unicode: bool = True

    @property
    def size(self) -> int:
        """Number of symbols in the class."""
        return sum(end - start + 1 for start, end in self.ranges)


class AssertionKind(Enum):
    """Zero-width constraint recognised by the compiler."""

    START_LINE = "start_line"
    END_LINE = "end_line"
    START_TEXT = "start_text"
    END_TEXT = "end_text"
    WORD_BOUNDARY = "word_boundary"
    NOT_WORD_BOUNDARY = "not_word_boundary"
    LOOKAHEAD = "lookahead"
    NEGATIVE_LOOKAHEAD = "negative_lookahead"
    LOOKBEHIND = "lookbehind"
    NEGATIVE_LOOKBEHIND = "negative_lookbehind"


@dataclass(frozen=True)
class Assertion:
    """Zero-width assertion. The kind does not affect scoring."""

    kind: AssertionKind


@dataclass(frozen=True)
class Repetition:
    """Greedy repetition of a single sub-pattern.

    Parameters
    ----------
    sub : PatternNode
        Repeated node.
    min : int
        Lower bound from the source pattern.
    max : int | None
        Upper bound from the source pattern, ``None`` when unbounded.
    greedy : bool
        ``False`` for lazy quantifiers such as ``*?``.
    """

    sub: PatternNode
    min: int = 0
    max: int | None = None
    greedy: bool = True


@dataclass(frozen=True)
class Capture:
    """Capturing group.

    Parameters
    ----------
    sub : PatternNode
        Group body.
    index : int
        1-based group number.
    name : str | None
        Group name for ``(?P<name>...)`` groups.
    """

    sub: PatternNode
    index: int = 0
    name: str | None = None


@dataclass(frozen=True)
class Sequence:
    """Concatenation of children, matched left to right."""

    children: tuple[PatternNode, ...]


@dataclass(frozen=True)
class Alternation:
    """Ordered choice between branches."""

    branches: tuple[PatternNode, ...]


PatternNode = Union[Empty, Literal, CharClass, Assertion, Repetition, Capture, Sequence, Alternation]


@dataclass(frozen=True)
class ScoreResult:
    """Result of scoring one node against a byte window.

    Parameters
    ----------
    contribution : int
        Specificity contributed by the node, an unsigned 64-bit value.
    consumed : int
        Number of window bytes the node accounted for.
    """

    contribution: int
    consumed: int
