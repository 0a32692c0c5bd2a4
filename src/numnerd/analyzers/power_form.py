# -----------------------------------------------------------------------------
#  power_form.py
#  Perfect powers n = x^y with x, y >= 2
# -----------------------------------------------------------------------------
"""
For n = x^y the exponent is bounded by y <= log2(n), so the plain search
tries every y from floor(log2 n) down to 2 and keeps the first exact integer
root. Going downwards means the largest exponent wins (2^32, not 65536^2).

Most composites are much cheaper: if a small prime p divides n exactly k
times, every valid exponent y must divide k, and

    n^(1/y) = (n / p^k)^(1/y) × p^(k/y)

so only the divisors of k need testing, against the smaller cofactor.
"""

from __future__ import annotations

import threading

import gmpy2

from numnerd.facts import FactSink, offload
from numnerd.registry import analyzer

SMALL_PRIMES = (
    2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97,
)


def _divisors_desc(k: int) -> list[int]:
    """Divisors of k that are >= 2, largest first."""
    divs: set[int] = set()
    d = 1
    while d * d <= k:
        if k % d == 0:
            divs.add(d)
            divs.add(k // d)
        d += 1
    return sorted((x for x in divs if x >= 2), reverse=True)


def _exact_root(n: int, y: int) -> int | None:
    root, exact = gmpy2.iroot(n, y)
    return int(root) if exact else None


def power_form_impl(n: int, stop: threading.Event | None = None) -> tuple[int, int] | None:
    """
    Return (x, y) with x^y == n, x > 1, y > 1 and y as large as possible,
    or None. Expects n > 1. Gives up (None) once `stop` is set.
    """
    # Does a small prime divide n, and how often?
    p = k = 0
    cofactor = n
    for q in SMALL_PRIMES:
        if n % q == 0:
            p = q
            while cofactor % q == 0:
                cofactor //= q
                k += 1
            break

    if p:
        # every exponent must divide k; k == 1 rules out any power
        for y in _divisors_desc(k):
            root = _exact_root(cofactor, y)
            if root is not None:
                return root * p ** (k // y), y
        return None

    # No small factor: the slow way
    for y in range(n.bit_length() - 1, 1, -1):
        if stop is not None and stop.is_set():
            return None
        root = _exact_root(n, y)
        if root is not None:
            return root, y
    return None


@analyzer(label="Perfect power", description="n = x^y with x, y ≥ 2, largest y preferred.")
async def power_form(n: int, sink: FactSink) -> None:
    if n <= 1:
        return
    form = await offload(power_form_impl, n)
    if form is not None:
        x, y = form
        await sink.basic(f"This number is a perfect power: (#{x})(^(#{y})).")
