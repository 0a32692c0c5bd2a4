from __future__ import annotations

import random

from numnerd.runtime import CFG

CONTINUE_PROBABILITY = 0.75


def make_rng(seed: int | None = None) -> random.Random:
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)


def random_number_text(rng: random.Random | None = None, p: float | None = None) -> str:
    """
    A random decimal string: first digit 1-9, then one more digit 0-9 for as
    long as rng.random() < p. Lengths are geometric with mean 1/(1-p).
    """
    rng = rng or make_rng()
    if p is None:
        p = float(CFG("RANDOM.CONTINUE_PROBABILITY", CONTINUE_PROBABILITY))
    if not 0.0 <= p < 1.0:
        raise ValueError(f"continuation probability must be in [0, 1), got {p}")

    digits = [str(rng.randint(1, 9))]
    while rng.random() < p:
        digits.append(str(rng.randint(0, 9)))
    return "".join(digits)
