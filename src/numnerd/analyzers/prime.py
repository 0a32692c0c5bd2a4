# -----------------------------------------------------------------------------
#  prime.py
#  Primality and Mersenne primes
# -----------------------------------------------------------------------------

from __future__ import annotations

from enum import Enum

import gmpy2
from sympy import isprime

from numnerd.dataio import load_mersenne_exponents
from numnerd.facts import FactSink, offload
from numnerd.registry import analyzer
from numnerd.runtime import CFG
from numnerd.utility import mersenne_exponent_if_exact

# sympy's BPSW test has no pseudoprimes below 2^64, so the answer there is exact.
DETERMINISTIC_LIMIT = 2**64


class Primality(Enum):
    COMPOSITE = 0
    PROBABLE = 1
    PRIME = 2


def primality(n: int, rounds: int = 30) -> Primality:
    """
    Classify n as composite, probably prime (Miller–Rabin with `rounds`
    rounds) or certainly prime (below 2^64, or a known Mersenne prime).
    0 and 1 are not prime.
    """
    if n < 2:
        return Primality.COMPOSITE
    if n < DETERMINISTIC_LIMIT:
        return Primality.PRIME if isprime(n) else Primality.COMPOSITE

    p = mersenne_exponent_if_exact(n)
    if p is not None and p in load_mersenne_exponents():
        return Primality.PRIME

    return Primality.PROBABLE if gmpy2.is_prime(n, rounds) else Primality.COMPOSITE


@analyzer(label="Prime number", description="Primality; Mersenne primes 2^p − 1.")
async def prime(n: int, sink: FactSink) -> None:
    rounds = int(CFG("PRIME.ROUNDS", 30))
    verdict = await offload(primality, n, rounds)

    if verdict is Primality.PRIME:
        await sink.basic("Is a prime number.")
    elif verdict is Primality.PROBABLE:
        await sink.basic("Is almost certainly a prime number.")
    else:
        return

    p = mersenne_exponent_if_exact(n)
    if p is not None:
        # p = bit length of n+1 minus one = number of set bits in n
        await sink.basic(f"Is a Mersenne prime: (#2)(^(#{p}))-(#1).")
