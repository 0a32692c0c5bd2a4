# -----------------------------------------------------------------------------
#  fibonacci.py
#  Fibonacci numbers (F0 = 0, F1 = 1)
# -----------------------------------------------------------------------------

from __future__ import annotations

from numnerd.facts import FactSink, offload
from numnerd.registry import analyzer
from numnerd.utility import is_square, ordinal_suffix


def _small_table(count: int = 94) -> dict[int, int]:
    """F(k) -> k for k < count; F(93) is the last one below 2^64."""
    table: dict[int, int] = {}
    a, b = 0, 1
    for k in range(count):
        table.setdefault(a, k)   # F1 = F2 = 1 keeps the smaller index
        a, b = b, a + b
    return table


SMALL_FIB_INDEX = _small_table()


def is_fibonacci(n: int) -> bool:
    """n is a Fibonacci number iff 5n²+4 or 5n²−4 is a perfect square."""
    if n < 0:
        return False
    t = 5 * n * n
    return is_square(t + 4) or is_square(t - 4)


def _add(a: tuple[int, int], b: tuple[int, int]) -> tuple[int, int]:
    """(F(i), F(i+1)), (F(j), F(j+1)) → (F(i+j), F(i+j+1))."""
    fi, fi1 = a
    fj, fj1 = b
    return fi * fj1 + (fi1 - fi) * fj, fi1 * fj1 + fi * fj


def fib_index(n: int) -> int | None:
    """
    Return k with F(k) == n (smallest k for n == 1), else None.

    Uses fast doubling: first square up (F(2^j), F(2^j+1)) until it passes n,
    then assemble k bit by bit from the top, keeping F(k) <= n. That is
    O(log k) big-integer multiplications instead of a walk over all k terms.
    """
    if n < 0:
        return None
    if n in SMALL_FIB_INDEX:
        return SMALL_FIB_INDEX[n]
    if not is_fibonacci(n):
        return None

    powers = [(1, 1)]              # (F(1), F(2)); powers[j] = (F(2^j), F(2^j+1))
    while powers[-1][0] <= n:
        powers.append(_add(powers[-1], powers[-1]))

    k, cur = 0, (0, 1)
    for j in range(len(powers) - 1, -1, -1):
        cand = _add(cur, powers[j])
        if cand[0] <= n:
            k, cur = k + (1 << j), cand

    return k if cur[0] == n else None


@analyzer(label="Fibonacci number", description="Term of the Fibonacci sequence.")
async def fibonacci(n: int, sink: FactSink) -> None:
    k = await offload(fib_index, n)
    if k is not None:
        await sink.basic(f"Is the (#{k}){ordinal_suffix(k)} fibonacci number.")
