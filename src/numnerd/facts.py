from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeVar

T = TypeVar("T")


class FactKind(Enum):
    BASIC = "basic"   # free-standing statement
    FORM = "form"     # labeled alternate representation


@dataclass(frozen=True, slots=True)
class Fact:
    kind: FactKind
    text: str                 # markup text, see numnerd.markup
    label: str | None = None  # only for FORM facts

    @classmethod
    def basic(cls, text: str) -> Fact:
        return cls(FactKind.BASIC, text)

    @classmethod
    def form(cls, label: str, text: str) -> Fact:
        return cls(FactKind.FORM, text, label)

    @property
    def is_form(self) -> bool:
        return self.kind is FactKind.FORM


@dataclass(frozen=True)
class FactCollection:
    """
    Everything the analyzers said about one number.

    basic/forms keep arrival order. Facts from one analyzer keep the order in
    which that analyzer sent them; the interleaving of different analyzers is
    arbitrary and differs between runs.
    """
    n: int
    basic: tuple[Fact, ...] = ()
    forms: tuple[Fact, ...] = ()
    failures: tuple[tuple[str, str], ...] = ()   # (analyzer label, "ExcType: msg")

    def __iter__(self):
        yield from self.basic
        yield from self.forms

    def __len__(self) -> int:
        return len(self.basic) + len(self.forms)


@dataclass
class FactSink:
    """
    One producer's sending handle onto the collector's bounded channel.

    send() suspends while the channel is full, so a slow consumer throttles
    fast analyzers.
    """
    label: str
    _queue: asyncio.Queue = field(repr=False)
    sent: int = 0

    async def send(self, fact: Fact) -> None:
        await self._queue.put(fact)
        self.sent += 1

    async def basic(self, text: str) -> None:
        await self.send(Fact.basic(text))

    async def form(self, label: str, text: str) -> None:
        await self.send(Fact.form(label, text))


async def offload(func: Callable[..., T], /, *args: Any) -> T:
    """
    Run blocking analyzer work in a worker thread so it never stalls the
    event loop or the other analyzers.

    If *func* accepts a ``stop`` keyword it receives a threading.Event that is
    set when the awaiting task is cancelled; long loops poll it and give up.
    """
    kwargs: dict[str, Any] = {}
    stop = threading.Event()
    if "stop" in inspect.signature(func).parameters:
        kwargs["stop"] = stop
    try:
        return await asyncio.to_thread(func, *args, **kwargs)
    except asyncio.CancelledError:
        stop.set()
        raise
