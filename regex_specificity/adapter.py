"""Foreign-call boundary: C-string arguments in, signed 64-bit score out."""

from __future__ import annotations

import ctypes
import logging
from typing import Union

from regex_specificity.api import get
from regex_specificity.config import SpecificityConfig
from regex_specificity.errors import InvalidEncoding, PatternSyntaxError

logger = logging.getLogger(__name__)

CString = Union[bytes, bytearray, memoryview, ctypes.c_char_p, None]

SPECIFICITY_GET = ctypes.CFUNCTYPE(ctypes.c_int64, ctypes.c_char_p, ctypes.c_char_p)

_I64_SPAN = 1 << 64
_I64_MAX = (1 << 63) - 1

_c_function = None

# Environment overrides do not reach foreign callers.
_BOUNDARY_CONFIG = SpecificityConfig()


def regex_specificity_get(string: CString, pattern: CString) -> int:
    """Score *pattern* against *string*, both given as null-terminated byte strings.

    Parameters
    ----------
    string : bytes | bytearray | memoryview | ctypes.c_char_p | None
        UTF-8 target string. Anything after the first NUL byte is ignored.
    pattern : bytes | bytearray | memoryview | ctypes.c_char_p | None
        UTF-8 pattern text. Anything after the first NUL byte is ignored.

    Returns
    -------
    int
        ``0`` if either argument is absent, ``-1`` if either is not valid
        UTF-8 or the pattern does not parse, otherwise the score as a signed
        64-bit integer.
    """
    string = _unwrap(string)
    pattern = _unwrap(pattern)
    if string is None or pattern is None:
        return 0

    try:
        target_text = _decode(string)
        pattern_text = _decode(pattern)
    except InvalidEncoding as exc:
        logger.debug("Rejected foreign call: %s", exc)
        return -1

    try:
        result = get(target_text, pattern_text, config=_BOUNDARY_CONFIG)
    except PatternSyntaxError as exc:
        logger.debug("Rejected foreign call: pattern %r: %s", pattern_text, exc)
        return -1

    return _to_i64(result)


def c_function() -> ctypes._CFuncPtr:
    """Return a C-callable function pointer for :func:`regex_specificity_get`.

    The pointer has the signature
    ``int64_t (*)(const char *string, const char *pattern)`` and stays valid
    for the lifetime of the process.
    """
    global _c_function
    if _c_function is None:
        _c_function = SPECIFICITY_GET(regex_specificity_get)
    return _c_function


def _unwrap(value: CString) -> bytes | bytearray | memoryview | None:
    if isinstance(value, ctypes.c_char_p):
        return value.value
    return value


def _decode(value: bytes | bytearray | memoryview) -> str:
    """Decode a C string as UTF-8, stopping at the first NUL byte."""
    data = bytes(value)
    end = data.find(b"\0")
    if end >= 0:
        data = data[:end]
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        msg = f"not valid UTF-8: {exc.reason} at byte {exc.start}"
        raise InvalidEncoding(msg) from exc


def _to_i64(value: int) -> int:
    """Reinterpret an unsigned 64-bit value as signed, wrapping like a C cast."""
    value %= _I64_SPAN
    if value > _I64_MAX:
        value -= _I64_SPAN
    return value
