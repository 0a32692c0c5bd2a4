# tests/test_collector.py
"""
Fact collector: completion, per-analyzer FIFO order, fault isolation,
cancellation and profile filtering.

Run: pytest -v tests/test_collector.py
"""

from __future__ import annotations

import asyncio
from collections import Counter

import pytest

from numnerd.collector import collect, collect_sync
from numnerd.facts import Fact, FactCollection
from numnerd.registry import Index, analyzer
from numnerd.runtime import APPLY

# ---------- fake analyzers ----------------------------------------------------


@analyzer(label="Chatty A", description="Many facts, yielding in between.")
async def chatty_a(n, sink):
    for i in range(25):
        await sink.basic(f"a{i}")
        await asyncio.sleep(0)


@analyzer(label="Chatty B", description="Many facts and forms.")
async def chatty_b(n, sink):
    for i in range(25):
        await sink.form("B", f"b{i}")
        if i % 3 == 0:
            await asyncio.sleep(0)


@analyzer(label="Quiet", description="Never says anything.")
async def quiet(n, sink):
    await asyncio.sleep(0)


@analyzer(label="Boom", description="Sends one fact, then fails.")
async def boom(n, sink):
    await sink.basic("before the fault")
    raise RuntimeError("boom")


def _texts(facts: FactCollection, prefix: str) -> list[str]:
    return [f.text for f in facts if f.text.startswith(prefix)]


# ---------- tests -------------------------------------------------------------


def test_collects_everything_and_routes_by_kind():
    facts = collect_sync(5, Index.of(chatty_a, chatty_b, quiet))
    assert len(facts.basic) == 25
    assert len(facts.forms) == 25
    assert all(not f.is_form for f in facts.basic)
    assert all(f.is_form and f.label == "B" for f in facts.forms)
    assert facts.failures == ()
    assert facts.n == 5
    assert len(facts) == 50


def test_fifo_within_one_analyzer():
    for _ in range(5):
        facts = collect_sync(1, Index.of(chatty_a, chatty_b))
        assert _texts(facts, "a") == [f"a{i}" for i in range(25)]
        assert _texts(facts, "b") == [f"b{i}" for i in range(25)]


def test_same_multiset_every_run(index):
    runs = [Counter(collect_sync(600, index)) for _ in range(4)]
    assert all(r == runs[0] for r in runs[1:])


def test_fault_is_isolated():
    facts = collect_sync(3, Index.of(chatty_a, boom, quiet))
    assert _texts(facts, "a") == [f"a{i}" for i in range(25)]
    assert Fact.basic("before the fault") in facts.basic
    assert facts.failures == (("Boom", "RuntimeError: boom"),)


def test_analyzer_raising_cancelled_is_a_fault():
    @analyzer(label="Self cancel")
    async def self_cancel(n, sink):
        await sink.basic("sent first")
        raise asyncio.CancelledError()

    async def main():
        return await asyncio.wait_for(collect(1, Index.of(chatty_a, self_cancel)), timeout=2)

    facts = asyncio.run(main())
    assert _texts(facts, "a") == [f"a{i}" for i in range(25)]
    assert Fact.basic("sent first") in facts.basic
    assert facts.failures == (("Self cancel", "CancelledError"),)


def test_analyzer_awaiting_cancelled_subtask_is_a_fault():
    @analyzer(label="Lost subtask")
    async def lost_subtask(n, sink):
        sub = asyncio.ensure_future(asyncio.sleep(10))
        sub.cancel()
        await sub

    async def main():
        return await asyncio.wait_for(collect(1, Index.of(quiet, lost_subtask)), timeout=2)

    facts = asyncio.run(main())
    assert [label for label, _ in facts.failures] == ["Lost subtask"]


@pytest.mark.parametrize("size", [1, 2, 64])
def test_queue_size_from_profile(size):
    APPLY({"COLLECTOR": {"QUEUE_SIZE": size}})
    facts = collect_sync(5, Index.of(chatty_a, chatty_b))
    assert len(facts) == 50


def test_cancellation_abandons_analyzers():
    state = {"started": False, "cancelled": False}

    @analyzer(label="Forever")
    async def forever(n, sink):
        state["started"] = True
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            state["cancelled"] = True
            raise

    async def main():
        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(collect(1, Index.of(forever, chatty_a)), timeout=0.05)

    asyncio.run(main())
    assert state == {"started": True, "cancelled": True}


def test_negative_input_rejected():
    with pytest.raises(ValueError):
        collect_sync(-1, Index.of(quiet))


def test_empty_index():
    facts = collect_sync(10, Index.of())
    assert len(facts) == 0
    assert facts.failures == ()


def test_profile_denylist(index):
    APPLY({"ANALYZERS": {"PARITY": False}})
    texts = [f.text for f in collect_sync(6, index)]
    assert "Is an even number." not in texts
    assert "Is a perfect number." in texts


def test_profile_allowlist(index):
    APPLY({"ANALYZERS": {"PARITY": True}})
    facts = collect_sync(6, index)
    assert [f.text for f in facts] == ["Is an even number."]


def test_all_packaged_analyzers_on_six(index):
    facts = collect_sync(6, index)
    basic = {f.text for f in facts.basic}
    forms = {f.label: f.text for f in facts.forms}
    assert {
        "Is an even number.",
        "Is the (#3)rd triangular number.",
        "The prime factors of this number are (#2)×(#3).",
        "Is a perfect number.",
    } <= basic
    assert forms["Binary"] == "110"
    assert forms["Roman numerals"] == "VI"
    assert facts.failures == ()


def test_limit_skips_analyzer_above_it():
    @analyzer(label="Small only", limit=100)
    async def small_only(n, sink):
        await sink.basic("small")

    idx = Index.of(small_only, quiet)
    assert idx.limits == {"Small only": 100}
    assert [f.text for f in collect_sync(100, idx)] == ["small"]
    assert len(collect_sync(101, idx)) == 0
