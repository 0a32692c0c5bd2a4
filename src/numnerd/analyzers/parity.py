# -----------------------------------------------------------------------------
#  parity.py
#  Even or odd
# -----------------------------------------------------------------------------

from __future__ import annotations

from numnerd.facts import FactSink
from numnerd.registry import analyzer


@analyzer(label="Parity", description="Whether n is even or odd.")
async def parity(n: int, sink: FactSink) -> None:
    await sink.basic("Is an odd number." if n & 1 else "Is an even number.")
