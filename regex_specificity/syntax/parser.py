"""Recursive-descent compiler from Python ``re`` pattern syntax to a pattern tree.

The compiler keeps alternations exactly as written. Unlike :mod:`re`, it never
folds ``a|b`` into a character set or hoists common prefixes out of branches,
so every declared branch is visible to the scorer.
"""

from __future__ import annotations

import re
import unicodedata

from regex_specificity.errors import PatternSyntaxError
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
    Sequence,
)
from regex_specificity.syntax import classes

DEFAULT_NEST_LIMIT = 100
MAX_REPEAT = 4294967295

SUPPORTED_FLAGS = re.ASCII | re.IGNORECASE | re.MULTILINE | re.DOTALL | re.VERBOSE | re.UNICODE

_FLAG_LETTERS = {
    "a": re.ASCII,
    "i": re.IGNORECASE,
    "L": re.LOCALE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": re.UNICODE,
    "x": re.VERBOSE,
}
_SCOPED_OFF = "imsx"
_SIMPLE_ESCAPES = {"a": "\a", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v", "\\": "\\"}
_ANCHORS = frozenset(
    {
        AssertionKind.START_LINE,
        AssertionKind.END_LINE,
        AssertionKind.START_TEXT,
        AssertionKind.END_TEXT,
        AssertionKind.WORD_BOUNDARY,
        AssertionKind.NOT_WORD_BOUNDARY,
    }
)
_WHITESPACE = frozenset(" \t\n\r\v\f")
_OCTAL = frozenset("01234567")
_DIGITS = frozenset("0123456789")
_HEX = frozenset("0123456789abcdefABCDEF")


def compile_pattern(
    pattern: str,
    flags: int | re.RegexFlag = 0,
    *,
    nest_limit: int = DEFAULT_NEST_LIMIT,
) -> PatternNode:
    """Parse *pattern* into a pattern tree.

    Parameters
    ----------
    pattern : str
        Regular expression in Python ``re`` syntax.
    flags : int | re.RegexFlag
        Any combination of ``re.ASCII``, ``re.IGNORECASE``,
        ``re.MULTILINE``, ``re.DOTALL``, ``re.VERBOSE`` and ``re.UNICODE``.
    nest_limit : int
        Maximum group nesting depth accepted.

    Returns
    -------
    PatternNode
        Root of the tree.

    Raises
    ------
    PatternSyntaxError
        If *pattern* is malformed, uses an unsupported construct, or nests
        deeper than *nest_limit*.
    ValueError
        If *flags* contains unsupported or incompatible flags.
    TypeError
        If *pattern* is not a string.
    """
    if not isinstance(pattern, str):
        msg = f"pattern must be str, not {type(pattern).__name__}"
        raise TypeError(msg)
    return _Parser(pattern, _check_flags(int(flags)), nest_limit).parse()


def _check_flags(flags: int) -> int:
    if flags & re.LOCALE:
        msg = "cannot use LOCALE flag with a str pattern"
        raise ValueError(msg)
    if flags & re.ASCII and flags & re.UNICODE:
        msg = "ASCII and UNICODE flags are incompatible"
        raise ValueError(msg)
    if flags & ~SUPPORTED_FLAGS:
        msg = f"unsupported flags: {flags & ~SUPPORTED_FLAGS:#x}"
        raise ValueError(msg)
    return flags


class _Parser:
    """Single-use parser state for one pattern."""

    def __init__(self, pattern: str, flags: int, nest_limit: int) -> None:
        self.pattern = pattern
        self.pos = 0
        self.flags = flags
        self.nest_limit = nest_limit
        self.groups = 0
        self.names: dict[str, int] = {}

    def parse(self) -> PatternNode:
        while self._global_flags():
            pass
        node = self._alternation(self.flags, 0)
        if self.pos < len(self.pattern):
            raise self._error("unbalanced parenthesis")
        return node

    # -- Cursor helpers -------------------------------------------------------

    def _error(self, msg: str, pos: int | None = None) -> PatternSyntaxError:
        return PatternSyntaxError(msg, self.pattern, self.pos if pos is None else pos)

    def _peek(self, offset: int = 0) -> str | None:
        index = self.pos + offset
        if index < len(self.pattern):
            return self.pattern[index]
        return None

    def _next(self) -> str | None:
        char = self._peek()
        if char is not None:
            self.pos += 1
        return char

    def _match(self, char: str) -> bool:
        if self._peek() == char:
            self.pos += 1
            return True
        return False

    def _skip_trivia(self, flags: int) -> None:
        """Skip whitespace and ``#`` comments in verbose mode."""
        if not flags & re.VERBOSE:
            return
        while True:
            char = self._peek()
            if char in _WHITESPACE:
                self.pos += 1
            elif char == "#":
                while self._peek() not in (None, "\n"):
                    self.pos += 1
            else:
                return

    # -- Structure ------------------------------------------------------------

    def _alternation(self, flags: int, depth: int) -> PatternNode:
        branches = [self._sequence(flags, depth)]
        while self._match("|"):
            branches.append(self._sequence(flags, depth))
        if len(branches) == 1:
            return branches[0]
        return Alternation(tuple(branches))

    def _sequence(self, flags: int, depth: int) -> PatternNode:
        items: list[PatternNode] = []
        while True:
            self._skip_trivia(flags)
            char = self._peek()
            if char is None or char in "|)":
                break
            start = self.pos
            atom = self._atom(flags, depth)
            if atom is None:
                continue
            items.append(self._quantify(atom, flags, start))

        merged: list[PatternNode] = []
        for item in items:
            # Transparent groups splice their children into this sequence.
            for part in item.children if isinstance(item, Sequence) else (item,):
                if isinstance(part, Empty):
                    continue
                if isinstance(part, Literal) and merged and isinstance(merged[-1], Literal):
                    merged[-1] = Literal(merged[-1].value + part.value)
                else:
                    merged.append(part)
        if not merged:
            return Empty()
        if len(merged) == 1:
            return merged[0]
        return Sequence(tuple(merged))

    def _quantify(self, atom: PatternNode, flags: int, start: int) -> PatternNode:
        repeated = False
        while True:
            self._skip_trivia(flags)
            here = self.pos
            bounds = self._quantifier()
            if bounds is None:
                return atom
            if repeated:
                raise self._error("multiple repeat", here)
            if isinstance(atom, Assertion) and atom.kind in _ANCHORS:
                raise self._error("nothing to repeat", start)
            lower, upper = bounds
            greedy = not self._match("?")
            if greedy:
                self._match("+")
            if bounds == (0, 0):
                atom = Empty()
            elif bounds != (1, 1):
                atom = Repetition(atom, lower, upper, greedy)
            repeated = True

    def _quantifier(self) -> tuple[int, int | None] | None:
        """Consume a quantifier and return its bounds, or ``None`` if there is none."""
        char = self._peek()
        if char == "*":
            self.pos += 1
            return 0, None
        if char == "+":
            self.pos += 1
            return 1, None
        if char == "?":
            self.pos += 1
            return 0, 1
        if char != "{":
            return None

        start = self.pos
        self.pos += 1
        low = self._digits()
        if self._match(","):
            high = self._digits()
            comma = True
        else:
            high = low
            comma = False
        if not self._match("}") or (not low and not comma):
            self.pos = start
            return None

        lower = int(low) if low else 0
        upper = int(high) if high else None
        for bound in (lower, upper):
            if bound is not None and bound >= MAX_REPEAT:
                raise self._error("the repetition number is too large", start + 1)
        if upper is not None and upper < lower:
            raise self._error("min repeat greater than max repeat", start + 1)
        return lower, upper

    def _digits(self) -> str:
        start = self.pos
        while self._peek() in _DIGITS:
            self.pos += 1
        return self.pattern[start : self.pos]

    # -- Atoms ----------------------------------------------------------------

    def _atom(self, flags: int, depth: int) -> PatternNode | None:
        start = self.pos
        char = self._next()
        if char == "(":
            return self._group(flags, depth, start)
        if char == "[":
            return self._set(flags, start)
        if char == ".":
            if flags & re.ASCII:
                return CharClass(classes.dot(bool(flags & re.DOTALL), classes.MAX_BYTE), unicode=False)
            return CharClass(classes.dot(bool(flags & re.DOTALL)))
        if char == "^":
            return Assertion(AssertionKind.START_LINE if flags & re.MULTILINE else AssertionKind.START_TEXT)
        if char == "$":
            return Assertion(AssertionKind.END_LINE if flags & re.MULTILINE else AssertionKind.END_TEXT)
        if char == "\\":
            return self._escape(flags, start)
        if char in "*+?":
            raise self._error("nothing to repeat", start)
        if char == "{":
            self.pos = start
            if self._quantifier() is not None:
                raise self._error("nothing to repeat", start)
            self.pos = start + 1
        return self._literal(char, flags)

    def _literal(self, char: str, flags: int) -> PatternNode:
        if flags & re.IGNORECASE:
            variants = classes.case_variants(char, bool(flags & re.ASCII))
            if len(variants) > 1:
                ranges = classes.normalize((ord(v), ord(v)) for v in variants)
                return CharClass(ranges, unicode=not (flags & re.ASCII))
        return Literal(char.encode("utf-8", "surrogatepass"))

    def _class(self, ranges: classes.Ranges, flags: int, negated: bool = False) -> CharClass:
        """Build a class node, applying case folding, negation and ASCII clipping."""
        ascii_mode = bool(flags & re.ASCII)
        if flags & re.IGNORECASE:
            ranges = classes.fold_case(ranges, ascii_mode)
        upper = classes.MAX_BYTE if ascii_mode else classes.MAX_CODEPOINT
        if negated:
            ranges = classes.negate(ranges, upper)
        elif ascii_mode:
            ranges = classes.clip(ranges, upper)
        return CharClass(ranges, unicode=not ascii_mode)

    def _escape(self, flags: int, start: int) -> PatternNode:
        char = self._next()
        if char is None:
            raise self._error("bad escape (end of pattern)", start)
        if char == "A":
            return Assertion(AssertionKind.START_TEXT)
        if char == "Z":
            return Assertion(AssertionKind.END_TEXT)
        if char == "b":
            return Assertion(AssertionKind.WORD_BOUNDARY)
        if char == "B":
            return Assertion(AssertionKind.NOT_WORD_BOUNDARY)
        category = self._category(char, flags)
        if category is not None:
            ranges, negated = category
            return self._class(ranges, flags, negated)
        if char == "0":
            return self._literal(self._octal(char, 2), flags)
        if char in _DIGITS:
            if (
                char in _OCTAL
                and self._peek() in _OCTAL
                and self._peek(1) in _OCTAL
            ):
                return self._literal(self._octal(char, 2, start), flags)
            raise self._error("backreferences are not supported", start)
        return self._literal(self._escaped_char(char, start), flags)

    def _category(self, char: str, flags: int) -> tuple[classes.Ranges, bool] | None:
        """Return ``(ranges, negated)`` for ``\\d \\D \\w \\W \\s \\S``."""
        tables = {"d": classes.digit, "w": classes.word, "s": classes.space}
        if char not in "dDwWsS":
            return None
        return tables[char.lower()](bool(flags & re.ASCII)), char.isupper()

    def _octal(self, first: str, extra: int, start: int | None = None) -> str:
        digits = first
        while len(digits) < extra + 1 and self._peek() in _OCTAL:
            digits += self._next()
        value = int(digits, 8)
        if value > 0o377:
            raise self._error(f"octal escape value \\{digits} outside of range 0-0o377", start)
        return chr(value)

    def _escaped_char(self, char: str, start: int) -> str:
        """Decode a single-character escape shared by sets and plain atoms."""
        if char in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[char]
        if char == "x":
            return self._hex(char, 2, start)
        if char == "u":
            return self._hex(char, 4, start)
        if char == "U":
            return self._hex(char, 8, start)
        if char == "N":
            return self._named(start)
        if char.isascii() and char.isalnum():
            raise self._error(f"bad escape \\{char}", start)
        return char

    def _hex(self, kind: str, width: int, start: int) -> str:
        digits = self.pattern[self.pos : self.pos + width]
        if len(digits) < width or not set(digits) <= _HEX:
            raise self._error(f"incomplete escape \\{kind}{digits}", start)
        self.pos += width
        value = int(digits, 16)
        if value > classes.MAX_CODEPOINT:
            raise self._error(f"bad escape \\{kind}{digits}", start)
        return chr(value)

    def _named(self, start: int) -> str:
        if not self._match("{"):
            raise self._error("missing {", self.pos)
        end = self.pattern.find("}", self.pos)
        if end < 0 or end == self.pos:
            raise self._error("missing character name", self.pos)
        name = self.pattern[self.pos : end]
        self.pos = end + 1
        try:
            return unicodedata.lookup(name)
        except KeyError:
            raise self._error(f"undefined character name {name!r}", start) from None

    # -- Character sets -------------------------------------------------------

    def _set(self, flags: int, start: int) -> CharClass:
        negated = self._match("^")
        items: list[tuple[int, int]] = []
        first = True
        while True:
            char = self._next()
            if char is None:
                raise self._error("unterminated character set", start)
            if char == "]" and not first:
                break
            first = False
            here = self.pos - 1

            code = self._set_item(char, flags, here)
            if isinstance(code, tuple):
                if self._peek() == "-" and self._peek(1) not in ("]", None):
                    raise self._error(f"bad character range {self.pattern[here:self.pos + 2]}", here)
                items.extend(code)
                continue

            if self._peek() == "-" and self._peek(1) not in ("]", None):
                self.pos += 1
                end_char = self._next()
                end = self._set_item(end_char, flags, self.pos - 1)
                if isinstance(end, tuple) or end < code:
                    raise self._error(f"bad character range {self.pattern[here:self.pos]}", here)
                items.append((code, end))
            else:
                items.append((code, code))

        return self._class(classes.normalize(items), flags, negated)

    def _set_item(self, char: str, flags: int, start: int) -> int | classes.Ranges:
        """Return a codepoint, or the ranges of a class escape, for one set member."""
        if char != "\\":
            return ord(char)
        escaped = self._next()
        if escaped is None:
            raise self._error("unterminated character set", start)
        category = self._category(escaped, flags)
        if category is not None:
            ranges, negated = category
            return classes.negate(ranges) if negated else ranges
        if escaped == "b":
            return 0x08
        if escaped in _OCTAL:
            return ord(self._octal(escaped, 2, start))
        if escaped in _DIGITS:
            raise self._error(f"bad escape \\{escaped}", start)
        return ord(self._escaped_char(escaped, start))

    # -- Groups ---------------------------------------------------------------

    def _group(self, flags: int, depth: int, start: int) -> PatternNode | None:
        depth += 1
        if depth > self.nest_limit:
            raise self._error(f"pattern nests too deeply (limit {self.nest_limit})", start)

        if not self._match("?"):
            index = self._open_group(None)
            return Capture(self._close(self._alternation(flags, depth), start), index)

        char = self._next()
        if char is None:
            raise self._error("unexpected end of pattern")
        if char in ":>":
            return self._close(self._alternation(flags, depth), start)
        if char == "#":
            end = self.pattern.find(")", self.pos)
            if end < 0:
                raise self._error("missing ), unterminated comment", start)
            self.pos = end + 1
            return None
        if char in "=!":
            self._close(self._alternation(flags, depth), start)
            return Assertion(AssertionKind.LOOKAHEAD if char == "=" else AssertionKind.NEGATIVE_LOOKAHEAD)
        if char == "<":
            kind = self._next()
            if kind not in ("=", "!"):
                raise self._error(f"unknown extension ?<{kind or ''}", start + 1)
            self._close(self._alternation(flags, depth), start)
            return Assertion(AssertionKind.LOOKBEHIND if kind == "=" else AssertionKind.NEGATIVE_LOOKBEHIND)
        if char == "P":
            kind = self._next()
            if kind == "<":
                name = self._group_name(">")
                index = self._open_group(name)
                return Capture(self._close(self._alternation(flags, depth), start), index, name)
            if kind == "=":
                self._group_name(")")
                raise self._error("backreferences are not supported", start)
            raise self._error(f"unknown extension ?P{kind or ''}", start + 1)
        if char == "(":
            raise self._error("conditional groups are not supported", start)
        if char in _FLAG_LETTERS or char == "-":
            self.pos -= 1
            scoped = self._scoped_flags(flags, start)
            return self._close(self._alternation(scoped, depth), start)
        raise self._error(f"unknown extension ?{char}", start + 1)

    def _close(self, node: PatternNode, start: int) -> PatternNode:
        if not self._match(")"):
            raise self._error("missing ), unterminated subpattern", start)
        return node

    def _open_group(self, name: str | None) -> int:
        self.groups += 1
        if name is not None:
            if name in self.names:
                msg = f"redefinition of group name {name!r} as group {self.groups}; was group {self.names[name]}"
                raise self._error(msg)
            self.names[name] = self.groups
        return self.groups

    def _group_name(self, terminator: str) -> str:
        end = self.pattern.find(terminator, self.pos)
        if end < 0:
            raise self._error(f"missing {terminator}, unterminated name")
        name = self.pattern[self.pos : end]
        if not name:
            raise self._error("missing group name")
        if not name.isidentifier():
            raise self._error(f"bad character in group name {name!r}")
        self.pos = end + 1
        return name

    # -- Flags ----------------------------------------------------------------

    def _flag_letters(self) -> int:
        value = 0
        while self._peek() in _FLAG_LETTERS:
            value |= _FLAG_LETTERS[self._next()]
        return value

    def _validate_inline(self, added: int, start: int) -> None:
        if added & re.LOCALE:
            raise self._error("bad inline flags: cannot use 'L' flag with a str pattern", start)
        if added & re.ASCII and added & re.UNICODE:
            raise self._error("bad inline flags: flags 'a', 'u' and 'L' are incompatible", start)

    def _global_flags(self) -> bool:
        """Consume a leading ``(?flags)`` group, returning whether one was found."""
        if not self.pattern.startswith("(?", self.pos) or self._peek(2) not in _FLAG_LETTERS:
            return False
        start = self.pos
        self.pos += 2
        added = self._flag_letters()
        if not self._match(")"):
            self.pos = start
            return False
        self._validate_inline(added, start)
        self.flags = _switch_charset(self.flags | added, added)
        return True

    def _scoped_flags(self, flags: int, start: int) -> int:
        added = self._flag_letters()
        removed = 0
        if self._match("-"):
            while self._peek() is not None and self._peek() in _FLAG_LETTERS:
                letter = self._next()
                if letter not in _SCOPED_OFF:
                    raise self._error("bad inline flags: cannot turn off flags 'a', 'u' and 'L'", start)
                removed |= _FLAG_LETTERS[letter]
            if not removed:
                raise self._error("missing flag", self.pos)
        if self._peek() == ")":
            raise self._error("global flags not at the start of the expression", start)
        if not self._match(":"):
            raise self._error("missing -, : or )", self.pos)
        self._validate_inline(added, start)
        if added & removed:
            raise self._error("bad inline flags: flag turned on and off", start)
        return _switch_charset((flags | added) & ~removed, added)


def _switch_charset(flags: int, added: int) -> int:
    """Let a newly added ``a`` or ``u`` flag replace the other."""
    if added & re.ASCII:
        return flags & ~re.UNICODE
    if added & re.UNICODE:
        return flags & ~re.ASCII
    return flags
