# -----------------------------------------------------------------------------
#  utility.py
#  Shared helpers: input parsing, integer predicates, ordinals, terminal size
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
import shutil
import sys
from collections.abc import Mapping

import gmpy2

from numnerd.runtime import CFG

_DIGITS_RE = re.compile(r"[0-9]+")
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


class UserInputError(Exception):
    pass


# --- input parsing ------------------------------------------------------------

def effective_digit_limit() -> int | None:
    """
    Decimal-digit limit for parsing and printing integers: the tighter of the
    profile's BEHAVIOUR.MAX_DIGITS and Python's own int/str guard.
    """
    try:
        profile_limit = int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000))
    except (TypeError, ValueError):
        profile_limit = None
    try:
        py_limit = sys.get_int_max_str_digits() or None  # 0 means "no limit"
    except AttributeError:
        py_limit = None

    limits = [x for x in (profile_limit, py_limit) if x]
    return min(limits) if limits else None


def parse_nonnegative(text: str) -> int:
    """
    Parse a decimal string of ASCII digits into a non-negative int.

    Raises UserInputError (echoing the input) for anything else: signs,
    whitespace, other scripts' digits, or more digits than the configured limit.
    """
    raw = "" if text is None else str(text)
    if not _DIGITS_RE.fullmatch(raw):
        raise UserInputError(f'"{raw}" could not be parsed as an unsigned integer.')

    limit = effective_digit_limit()
    if limit is not None and len(raw.lstrip("0")) > limit:
        raise UserInputError(
            f"input has more than {limit} decimal digits. "
            "Increase BEHAVIOUR.MAX_DIGITS in the profile or pass a smaller value."
        )
    try:
        return int(raw)
    except ValueError:
        # Python's own str->int guard is stricter than the profile limit
        raise UserInputError(f'"{raw[:40]}…" is too long to be parsed.') from None


def apply_digit_limit() -> None:
    """Align Python's int/str conversion guard with BEHAVIOUR.MAX_DIGITS."""
    try:
        limit = int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000))
    except (TypeError, ValueError):
        return
    try:
        sys.set_int_max_str_digits(max(limit, 640))  # 640 is Python's floor
    except (AttributeError, ValueError):
        pass


# --- integer predicates ---------------------------------------------------------

def is_square(x: int) -> bool:
    return x >= 0 and bool(gmpy2.is_square(x))


def exact_isqrt(x: int) -> int | None:
    """Return r with r*r == x, else None."""
    if x < 0:
        return None
    root, rem = gmpy2.isqrt_rem(x)
    return int(root) if rem == 0 else None


def sigma_from_fac(fac: Mapping[int, int]) -> int:
    """σ(n) = ∏ (1 + p + … + p^k) over the prime factorization."""
    s = 1
    for p, e in fac.items():
        s *= (p ** (e + 1) - 1) // (p - 1)
    return s


def mersenne_exponent_if_exact(n: int) -> int | None:
    """Return p if n == 2^p − 1 (p >= 1), else None."""
    m = n + 1
    if m <= 1 or m & (m - 1):
        return None
    return m.bit_length() - 1


# --- text helpers ---------------------------------------------------------------

def ordinal_suffix(n: int) -> str:
    """Return the English ordinal suffix for n ('st', 'nd', 'rd' or 'th')."""
    _MOD_100 = 100
    _MOD_10 = 10
    _TEENS_START = 11
    _TEENS_END = 13
    _LAST_DIGIT_SUFFIX = {1: "st", 2: "nd", 3: "rd"}

    if _TEENS_START <= n % _MOD_100 <= _TEENS_END:
        return "th"
    return _LAST_DIGIT_SUFFIX.get(n % _MOD_10, "th")


def strip_ansi(s: str | None) -> str:
    return ANSI_RE.sub("", s or "")


def token(name: str) -> str:
    """Profile token for a label: 'Perfect power' -> 'PERFECT_POWER'."""
    tok = re.sub(r"[^A-Za-z0-9]+", "_", name).upper().strip("_")
    return re.sub(r"__+", "_", tok)


def get_terminal_width(default=80):
    """
    Return the terminal's character width if detected, else the default
    value (80 by default).
    """
    try:
        return shutil.get_terminal_size().columns
    except (OSError, ValueError):
        return default


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out
