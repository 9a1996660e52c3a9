"""Exceptions raised by the compiler and the foreign-call boundary."""

from __future__ import annotations

import re


class PatternSyntaxError(re.error):
    """Pattern text is not valid regular expression syntax.

    Subclasses :class:`re.error`, so callers already handling errors from
    :func:`re.compile` catch it too.

    Parameters
    ----------
    msg : str
        Description of the problem.
    pattern : str | None
        The offending pattern.
    pos : int | None
        Index in *pattern* where the problem was found.
    """


class InvalidEncoding(ValueError):
    """Byte input at the foreign-call boundary is not valid UTF-8."""
