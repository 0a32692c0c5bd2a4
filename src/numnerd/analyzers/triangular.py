# -----------------------------------------------------------------------------
#  triangular.py
#  Triangular numbers T(k) = k(k+1)/2
# -----------------------------------------------------------------------------

from __future__ import annotations

from numnerd.facts import FactSink
from numnerd.registry import analyzer
from numnerd.utility import exact_isqrt, ordinal_suffix


def triangular_index(n: int) -> int | None:
    """
    Return k >= 0 with k(k+1)/2 == n, else None.

    n is triangular iff 8n+1 is an odd perfect square r², and then k = (r−1)/2.
    """
    if n < 0:
        return None
    r = exact_isqrt(8 * n + 1)
    if r is None or r % 2 == 0:
        return None
    return (r - 1) // 2


@analyzer(label="Triangular number", description="n = k(k+1)/2 for some k ≥ 0.")
async def triangular(n: int, sink: FactSink) -> None:
    k = triangular_index(n)
    if k is not None:
        await sink.basic(f"Is the (#{k}){ordinal_suffix(k)} triangular number.")
