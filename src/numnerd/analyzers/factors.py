# -----------------------------------------------------------------------------
#  factors.py
#  Prime factorization, sum of divisors, aliquot classification
# -----------------------------------------------------------------------------

from __future__ import annotations

from numnerd.facts import FactSink, offload
from numnerd.registry import analyzer
from numnerd.runtime import CFG
from numnerd.utility import sigma_from_fac

FACTOR_LIMIT = 100_000_000


def factor_small(n: int) -> list[tuple[int, int]]:
    """
    Trial division; expects 2 <= n <= FACTOR_LIMIT-ish.
    Returns [(prime, exponent), ...] in increasing prime order.
    """
    factors: list[tuple[int, int]] = []

    count = 0
    while n % 2 == 0:
        n //= 2
        count += 1
    if count:
        factors.append((2, count))

    # Only primes get recorded: every composite divisor's own prime factors
    # have already been divided out by the time i reaches it.
    i = 3
    while n != 1 and i * i <= n:
        count = 0
        while n % i == 0:
            n //= i
            count += 1
        if count:
            factors.append((i, count))
        i += 2

    # What is left has no factor <= its square root
    if n != 1:
        factors.append((n, 1))
    return factors


def format_factors(factors: list[tuple[int, int]]) -> str:
    """[(2, 2), (3, 1)] → '(#2)(^(#2))×(#3)'"""
    parts = []
    for p, e in factors:
        parts.append(f"(#{p})" if e == 1 else f"(#{p})(^(#{e}))")
    return "×".join(parts)


def aliquot_class(n: int, sigma: int) -> str:
    """Compare σ(n) with 2n: 'deficient', 'perfect' or 'abundant'."""
    if sigma < 2 * n:
        return "deficient"
    if sigma == 2 * n:
        return "perfect"
    return "abundant"


@analyzer(
    label="Prime factorization",
    description="Prime factors, σ(n), deficient/perfect/abundant (n ≤ 10^8).",
)
async def factors(n: int, sink: FactSink) -> None:
    limit = int(CFG("LIMITS.FACTOR_LIMIT", FACTOR_LIMIT))
    if n <= 1 or n > limit:
        return

    fac = await offload(factor_small, n)
    await sink.basic(f"The prime factors of this number are {format_factors(fac)}.")

    sigma = sigma_from_fac(dict(fac))
    await sink.basic(f"The sum of its divisors is (#{sigma}).")

    kind = aliquot_class(n, sigma)
    article = "an" if kind == "abundant" else "a"
    await sink.basic(f"Is {article} {kind} number.")
    if sigma == 2 * n - 1:
        await sink.basic("Is an almost perfect number.")
