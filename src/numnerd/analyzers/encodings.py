# -----------------------------------------------------------------------------
#  encodings.py
#  Binary, hexadecimal and Roman numeral forms
# -----------------------------------------------------------------------------

from __future__ import annotations

from numnerd.facts import FactSink
from numnerd.registry import analyzer

ROMAN_MAX = 3999

_ROMAN_UNITS = ("", "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX")
_ROMAN_TENS = ("", "X", "XX", "XXX", "XL", "L", "LX", "LXX", "LXXX", "XC")
_ROMAN_HUNDREDS = ("", "C", "CC", "CCC", "CD", "D", "DC", "DCC", "DCCC", "CM")
_ROMAN_THOUSANDS = ("", "M", "MM", "MMM")


def encode_roman(n: int) -> str | None:
    """Roman numerals for 1..3999, one table lookup per decimal place; else None."""
    if not 1 <= n <= ROMAN_MAX:
        return None
    n, u = divmod(n, 10)
    n, t = divmod(n, 10)
    th, h = divmod(n, 10)
    return _ROMAN_THOUSANDS[th] + _ROMAN_HUNDREDS[h] + _ROMAN_TENS[t] + _ROMAN_UNITS[u]


@analyzer(label="Encodings", description="Binary, hexadecimal and Roman numeral forms.")
async def encodings(n: int, sink: FactSink) -> None:
    await sink.form("Binary", format(n, "b"))
    await sink.form("Hexadecimal", format(n, "X"))

    roman = encode_roman(n)
    if roman:
        await sink.form("Roman numerals", roman)
