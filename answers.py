from __future__ import annotations

import math
import re
from typing import Optional

from sympy import Rational

# --- Parsing / validation helpers ------------------------------------------------
LEN_LIMIT = 50
NOT_A_NUMBER_MSG = "Please enter a number."
_TOO_LARGE_MSG = "Answer is too large."
_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE](?P<exp>[+-]?\d+))?$")

# Hard-stop so "1e999999999" never reaches the exact parser
_MAX_EXPONENT_ABS = 300
_MAX_MAGNITUDE = Rational(10) ** _MAX_EXPONENT_ABS


def validate_answer_text(s: str) -> Optional[str]:
    if s is None or not isinstance(s, str) or not s.strip():
        return "Answer required."
    s = s.strip()
    if len(s) > LEN_LIMIT:
        return f"Answer too long (> {LEN_LIMIT})."
    m = _NUMBER_RE.fullmatch(s)
    if m is None:
        return NOT_A_NUMBER_MSG
    if m.group("exp") is not None and abs(int(m.group("exp"))) > _MAX_EXPONENT_ABS:
        return _TOO_LARGE_MSG
    return None


def parse_answer(s: str) -> Rational:
    """
    Exact value of a typed answer. "4", "4.0" and "+4" all give Rational(4).
    Raises ValueError with a user-facing message for anything else.
    """
    msg = validate_answer_text(s)
    if msg:
        raise ValueError(msg)
    value = Rational(s.strip())
    if abs(value) > _MAX_MAGNITUDE:
        raise ValueError(_TOO_LARGE_MSG)
    return value


def exact_value(x: float | int) -> Rational:
    if isinstance(x, bool) or not math.isfinite(x):
        raise ValueError("expected a finite number")
    if isinstance(x, int) or float(x).is_integer():
        return Rational(int(x))
    # repr() of a float is its shortest round-tripping decimal, so 0.1 stays 1/10
    return Rational(repr(float(x)))


def stored_value(answer: Rational) -> float:
    """The float that gets written to user_answer."""
    return float(answer)


def is_correct(answer: Rational, final_answer: float | int) -> bool:
    # Compare what is stored, so a saved row never disagrees with its own is_correct
    return bool(exact_value(stored_value(answer)) == exact_value(final_answer))
