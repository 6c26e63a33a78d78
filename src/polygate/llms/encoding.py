from __future__ import annotations

"""
Conversion of opaque textual control values (thinking level, effort, ...)
into the typed JSON value a provider expects.
"""

import math
import re

from .types import ControlValue

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def encode_control_value(raw: str) -> ControlValue:
    """
    Parse `raw` as bool, then int, then finite float, else return it trimmed.

    Never raises. Booleans are the exact lowercase literals only; integers are
    base-10 and must fit a signed 64-bit value; floats that overflow to
    infinity or spell NaN/inf fall through to the string case.
    """
    value = raw.strip()

    if value == "true":
        return True
    if value == "false":
        return False

    if _INT_RE.fullmatch(value):
        number = int(value)
        if _I64_MIN <= number <= _I64_MAX:
            return number

    if _FLOAT_RE.fullmatch(value):
        parsed = float(value)
        if math.isfinite(parsed):
            return parsed

    return value
