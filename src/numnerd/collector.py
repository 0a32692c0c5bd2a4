"""
Fact collector: fan one integer out to every enabled analyzer and gather
what they say.

Each analyzer runs as its own asyncio task and talks to the collector through
a bounded queue (capacity COLLECTOR.QUEUE_SIZE, default 1). Every producer
ends by putting a completion marker on the same queue, so the consumer knows
the channel is drained once it has counted one marker per analyzer. An
analyzer that raises still sends its marker; the error is recorded and
reported, and the other analyzers' facts are unaffected.

Cancelling collect() cancels every analyzer task that is still running.
"""

from __future__ import annotations

import asyncio
import sys
import time
import traceback
from dataclasses import dataclass

from colorama import Fore, Style

from numnerd.facts import Fact, FactCollection, FactSink
from numnerd.registry import AnalyzerFn, Index, default_index, enabled_labels
from numnerd.runtime import CFG
from numnerd.runtime import current as _rt_current
from numnerd.utility import get_terminal_width, strip_ansi


@dataclass(frozen=True, slots=True)
class _Finished:
    """Completion marker: one per analyzer, always the last thing it sends."""
    label: str
    sent: int
    elapsed_ms: float
    error: str | None = None


# ---------- diagnostics -------------------------------------------------------

def _fmt_ms(ms: float) -> str:
    return f"{ms:7.2f} ms"


def _print_result_line(done: _Finished) -> None:
    """One stderr line per analyzer: timing, colored status, detail."""
    if done.error:
        stat = f"{Fore.RED}{Style.BRIGHT}ERR {Style.RESET_ALL}"
        detail = done.error
    elif done.sent:
        stat = f"{Fore.GREEN}{Style.BRIGHT}OK  {Style.RESET_ALL}"
        detail = f"{done.sent} fact(s)"
    else:
        stat = f"{Style.DIM}NO  {Style.RESET_ALL}"
        detail = None

    line = f"{Style.DIM}[{_fmt_ms(done.elapsed_ms)}]{Style.RESET_ALL} {stat}  {done.label}"
    if detail:
        max_tail = max(10, get_terminal_width() - len(strip_ansi(line)) - 5)
        if len(detail) > max_tail:
            detail = detail[: max_tail - 1] + "…"
        line += f" — {Style.DIM}{detail}{Style.RESET_ALL}"

    sys.stderr.write(line + "\n")
    sys.stderr.flush()


# ---------- producer side -----------------------------------------------------

async def _produce(label: str, fn: AnalyzerFn, n: int, queue: asyncio.Queue) -> None:
    sink = FactSink(label, queue)
    error: str | None = None
    t0 = time.perf_counter()
    try:
        await fn(n, sink)
    except asyncio.CancelledError as e:
        if asyncio.current_task().cancelling():
            raise
        # raised by the analyzer's own awaits, not by collect(): a fault
        error = f"{e.__class__.__name__}: {e}".rstrip(": ")
    except Exception as e:
        error = f"{e.__class__.__name__}: {e}"
        if _rt_current().debug:
            traceback.print_exc(file=sys.stderr)
    dt = (time.perf_counter() - t0) * 1000.0
    await queue.put(_Finished(label, sink.sent, dt, error))


# ---------- consumer side -----------------------------------------------------

async def collect(n: int, index: Index | None = None) -> FactCollection:
    """
    Run every enabled analyzer on n concurrently and return all their facts.

    Returns only after each analyzer task has finished. Facts keep per-analyzer
    send order; nothing is promised about the interleaving across analyzers.
    """
    n = int(n)
    if n < 0:
        raise ValueError("collect() expects a non-negative integer")

    index = index or default_index()
    labels = [
        lbl for lbl in enabled_labels(index)
        if index.limits.get(lbl) is None or n <= index.limits[lbl]
    ]
    debug = bool(_rt_current().debug)

    size = max(1, int(CFG("COLLECTOR.QUEUE_SIZE", 1)))
    queue: asyncio.Queue[Fact | _Finished] = asyncio.Queue(maxsize=size)

    tasks = [
        asyncio.create_task(_produce(label, index.funcs[label], n, queue), name=f"analyzer:{label}")
        for label in labels
    ]

    basic: list[Fact] = []
    forms: list[Fact] = []
    failures: list[tuple[str, str]] = []

    try:
        remaining = len(tasks)
        while remaining:
            item = await queue.get()
            if isinstance(item, _Finished):
                remaining -= 1
                if item.error:
                    failures.append((item.label, item.error))
                if debug or item.error:
                    _print_result_line(item)
                continue
            (forms if item.is_form else basic).append(item)
    finally:
        # No-op for finished tasks; abandons the rest when we are cancelled.
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    return FactCollection(n=n, basic=tuple(basic), forms=tuple(forms), failures=tuple(failures))


def collect_sync(n: int, index: Index | None = None) -> FactCollection:
    """Blocking wrapper for callers without an event loop (CLI, scripts)."""
    return asyncio.run(collect(n, index))
