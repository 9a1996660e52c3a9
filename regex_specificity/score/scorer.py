"""Specificity scoring of a pattern tree against the bytes it matched."""

from __future__ import annotations

from collections.abc import Generator
from typing import Union

from regex_specificity.models import (
    Alternation,
    Assertion,
    Capture,
    CharClass,
    Empty,
    Literal,
    PatternNode,
    Repetition,
    ScoreResult,
    Sequence,
)

SHIFT = 16
WEIGHT = 1 << SHIFT
STEP = 128
MAX_SHIFT = SHIFT - 1
LOOK_SHIFT = SHIFT - (STEP.bit_length() - 1)
U64_MAX = (1 << 64) - 1

_Request = tuple[PatternNode, memoryview, int]
_Frame = Generator[_Request, ScoreResult, ScoreResult]


def score(node: PatternNode, window: bytes | bytearray | memoryview, weight: int = WEIGHT) -> ScoreResult:
    """Score *node* against *window*, starting from *weight*.

    The caller guarantees that *node* matches *window* in full; a mismatching
    pair still yields a result, just not a meaningful one. Composite nodes are
    evaluated on an explicit stack, so tree depth is not limited by the
    interpreter's recursion limit.

    Parameters
    ----------
    node : PatternNode
        Root of the pattern tree.
    window : bytes | bytearray | memoryview
        Bytes of the target string.
    weight : int
        Initial certainty budget, between 0 and ``U64_MAX``.

    Returns
    -------
    ScoreResult
        Total contribution and number of bytes consumed.

    Raises
    ------
    ValueError
        If *weight* is outside the unsigned 64-bit range.
    TypeError
        If the tree contains an object that is not a pattern node.
    """
    if not 0 <= weight <= U64_MAX:
        msg = f"weight must be within [0, {U64_MAX}], got {weight}"
        raise ValueError(msg)

    view = memoryview(window).cast("B")
    outcome = _visit(node, view, weight)
    if isinstance(outcome, ScoreResult):
        return outcome

    stack: list[_Frame] = [outcome]
    sent: ScoreResult | None = None
    while stack:
        try:
            request = stack[-1].send(sent)
        except StopIteration as stop:
            stack.pop()
            sent = stop.value
            continue
        outcome = _visit(*request)
        if isinstance(outcome, ScoreResult):
            sent = outcome
        else:
            stack.append(outcome)
            sent = None
    return sent


def _visit(node: PatternNode, window: memoryview, weight: int) -> Union[ScoreResult, _Frame]:
    """Evaluate a leaf directly, or return the generator for a composite node."""
    if isinstance(node, Empty):
        return ScoreResult(0, 0)
    if isinstance(node, Literal):
        return _literal(node, window, weight)
    if isinstance(node, CharClass):
        return _char_class(node, window, weight)
    if isinstance(node, Assertion):
        return ScoreResult(max(1, weight >> LOOK_SHIFT), 0)
    if isinstance(node, Repetition):
        return _repetition(node, window, weight)
    if isinstance(node, Capture):
        return _capture(node, window, weight)
    if isinstance(node, Sequence):
        return _sequence(node, window, weight)
    if isinstance(node, Alternation):
        return _alternation(node, window, weight)
    msg = f"Not a pattern node: {node!r}"
    raise TypeError(msg)


def _literal(node: Literal, window: memoryview, weight: int) -> ScoreResult:
    consumed = min(len(node.value), len(window))
    return ScoreResult(min(consumed * weight, U64_MAX), consumed)


def _char_class(node: CharClass, window: memoryview, weight: int) -> ScoreResult:
    if not window:
        return ScoreResult(0, 0)

    consumed = _char_width(window) if node.unicode else 1

    size = node.size
    if size <= 1:
        return ScoreResult(weight, consumed)
    shift = min(MAX_SHIFT, size.bit_length())
    return ScoreResult(max(1, weight >> shift), consumed)


def _char_width(window: memoryview) -> int:
    """Return the byte length of the first UTF-8 character, or 1 if it does not decode.

    Only the first character is decoded. For a window cut from valid text
    this agrees with decoding the whole window, since a suffix of valid
    UTF-8 is valid exactly when it starts on a character boundary.
    """
    lead = window[0]
    if lead < 0x80:
        return 1
    if 0xC0 <= lead < 0xE0:
        width = 2
    elif 0xE0 <= lead < 0xF0:
        width = 3
    elif 0xF0 <= lead < 0xF8:
        width = 4
    else:
        return 1
    if width > len(window):
        return 1
    try:
        bytes(window[:width]).decode("utf-8")
    except UnicodeDecodeError:
        return 1
    return width


def _repetition(node: Repetition, window: memoryview, weight: int) -> _Frame:
    total = 0
    offset = 0
    while offset < len(window):
        result = yield node.sub, window[offset:], weight
        if result.consumed == 0:
            break
        total = _add(total, result.contribution)
        offset += result.consumed
        weight = _decay(weight, result.consumed)
    return ScoreResult(total, offset)


def _capture(node: Capture, window: memoryview, weight: int) -> _Frame:
    result = yield node.sub, window, weight
    return result


def _sequence(node: Sequence, window: memoryview, weight: int) -> _Frame:
    total = 0
    offset = 0
    for child in node.children:
        result = yield child, window[offset:], weight
        total = _add(total, result.contribution)
        offset += result.consumed
        weight = _decay(weight, result.consumed)
    return ScoreResult(total, offset)


def _alternation(node: Alternation, window: memoryview, weight: int) -> _Frame:
    # Divide by every declared branch, including those never evaluated.
    branches = max(1, len(node.branches))
    for branch in node.branches:
        result = yield branch, window, weight
        if result.consumed > 0 or isinstance(branch, Empty):
            return ScoreResult(result.contribution // branches, result.consumed)
    return ScoreResult(0, 0)


def _add(total: int, contribution: int) -> int:
    return min(total + contribution, U64_MAX)


def _decay(weight: int, consumed: int) -> int:
    return max(0, weight - consumed * STEP)
