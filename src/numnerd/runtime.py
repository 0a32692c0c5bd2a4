# runtime.py
"""
The active profile, per context.

Each asyncio task (and every thread started through asyncio.to_thread) sees
the Runtime of the context it was created in, so a web request can install
its own without touching the others.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from numnerd.config import Settings

REQUIRED_MODULES = ("sympy", "gmpy2")


@dataclass
class Runtime:
    profile_name: str = "default"
    settings: dict[str, Any] = field(default_factory=dict)
    debug: bool = False  # per-analyzer timings and tracebacks on stderr

    def apply(self, settings: Settings | Mapping[str, Any]) -> None:
        """Take over a loaded profile, or a plain {SECTION: {KEY: value}} mapping."""
        if isinstance(settings, Mapping):
            self.profile_name, self.settings = "custom", dict(settings)
        else:
            self.profile_name, self.settings = settings.name, dict(settings.as_dict())
        dbg = self.get("BEHAVIOUR.DEBUG")
        if isinstance(dbg, bool):
            self.debug = dbg

    def get(self, key: str, default: Any = None) -> Any:
        """Dotted lookup: get('COLLECTOR.QUEUE_SIZE')."""
        node: Any = self.settings
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return default
            node = node[part]
        return node


_current_runtime: ContextVar[Runtime | None] = ContextVar("numnerd_runtime", default=None)


def current() -> Runtime:
    rt = _current_runtime.get()
    if rt is None:
        rt = reset()
    return rt


def reset(settings: Settings | Mapping[str, Any] | None = None) -> Runtime:
    """Install a fresh Runtime (optionally built from settings) in this context."""
    rt = Runtime()
    if settings is not None:
        rt.apply(settings)
    _current_runtime.set(rt)
    return rt


def APPLY(settings: Settings | Mapping[str, Any]) -> None:
    current().apply(settings)


def CFG(key: str, default: Any = None) -> Any:
    return current().get(key, default)


def missing_modules() -> list[str]:
    """Required compiled/numeric packages that cannot be imported."""
    return [name for name in REQUIRED_MODULES if find_spec(name) is None]
