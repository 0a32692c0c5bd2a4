# src/numnerd/registry.py
from __future__ import annotations

import inspect
import sys
from collections import OrderedDict
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from functools import lru_cache
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from numnerd.runtime import CFG
from numnerd.utility import token

AnalyzerFn = Callable[..., Awaitable[None]]   # async (n, sink) -> None


# --------------------- Discovery → Index (immutable) ----------------------

@dataclass
class Index:
    funcs: dict[str, AnalyzerFn]                                   # label -> analyzer
    descriptions: dict[str, str] = field(default_factory=dict)     # label -> short description
    label_to_token: dict[str, str] = field(default_factory=dict)   # label -> TOKEN
    limits: dict[str, int] = field(default_factory=dict)           # label -> largest n it runs on

    @classmethod
    def of(cls, *fns: AnalyzerFn) -> Index:
        """Build an Index from analyzer functions directly (tests, embedding)."""
        idx = cls(funcs=OrderedDict())
        for fn in fns:
            idx.add(getattr(fn, "label", fn.__name__), fn)
        return idx

    def add(self, label: str, fn: AnalyzerFn) -> None:
        self.funcs[label] = fn
        self.descriptions[label] = getattr(fn, "description", "")
        self.label_to_token[label] = token(label)
        lim = getattr(fn, "limit", None)
        if lim is not None:
            self.limits[label] = lim


@dataclass
class DiscoveryReport:
    ws_loaded: list[tuple[str, int]] = field(default_factory=list)         # (filename.py, count)
    ws_failed: list[tuple[str, str]] = field(default_factory=list)         # (filename.py, error)
    pkg_loaded: list[tuple[str, int]] = field(default_factory=list)        # (module.name, count)
    pkg_failed: list[tuple[str, str]] = field(default_factory=list)        # (module.name, error)
    skipped_duplicates: list[tuple[str, str, str]] = field(default_factory=list)  # (label, skipped, kept)


def _is_analyzer(obj) -> bool:
    return inspect.iscoroutinefunction(obj) and getattr(obj, "__is_analyzer__", False)


def _import_module_from_file(path: Path, name_hint: str):
    spec = spec_from_file_location(name_hint, path)
    if not spec or not spec.loader:
        raise ImportError(f"Cannot import {path}")
    mod = module_from_spec(spec)
    sys.modules[name_hint] = mod
    spec.loader.exec_module(mod)
    return mod


def _collect_from_module(mod) -> list[AnalyzerFn]:
    # definition order, not alphabetical: it is the order users read in the module
    found = [o for _, o in vars(mod).items() if _is_analyzer(o)]
    return [fn for fn in found if fn.__module__ == mod.__name__]


# ---------- Decorator (only tags the function; no side effects) ----------

def analyzer(*, label: str, description: str = "", limit: int | None = None):
    """
    Tag an async analyzer(n, sink). `limit`, when given, is the largest n the
    analyzer is spawned for; above it the collector skips it.
    """
    def deco(fn: AnalyzerFn) -> AnalyzerFn:
        fn.__is_analyzer__ = True
        fn.label = label
        fn.description = description
        if limit is not None:
            fn.limit = int(limit)
        return fn
    return deco


def discover_with_report(workspace: Path | None = None) -> tuple[Index, DiscoveryReport]:
    """
    Discover analyzers from the workspace and the package.
    Workspace files come first and win on duplicate labels; broken modules are
    reported and skipped, never fatal.
    """
    report = DiscoveryReport()
    idx = Index(funcs=OrderedDict())
    label_source: dict[str, str] = {}

    def _add_from_module(mod, source_name: str) -> int:
        found = 0
        for fn in _collect_from_module(mod):
            label = fn.label
            if label in idx.funcs:
                report.skipped_duplicates.append((label, source_name, label_source[label]))
                continue
            idx.add(label, fn)
            label_source[label] = source_name
            found += 1
        return found

    # 1) Workspace (*.py)
    if workspace:
        ws_dir = workspace / "analyzers"
        if ws_dir.is_dir():
            for file in sorted(ws_dir.glob("*.py")):
                if file.name == "__init__.py":
                    continue
                try:
                    mod = _import_module_from_file(file, f"_nn_user_analyzer_{file.stem}")
                    report.ws_loaded.append((file.name, _add_from_module(mod, f"ws:{file.name}")))
                except Exception as e:
                    report.ws_failed.append((file.name, f"{type(e).__name__}: {e}"))

    # 2) Packaged (numnerd.analyzers.*)
    pkg_dir = pkg_files("numnerd") / "analyzers"
    with as_file(pkg_dir) as real:
        for file in sorted(Path(real).glob("*.py")):
            if file.name == "__init__.py":
                continue
            modname = f"numnerd.analyzers.{file.stem}"
            try:
                mod = import_module(modname)
                report.pkg_loaded.append((modname, _add_from_module(mod, f"pkg:{modname}")))
            except Exception as e:
                report.pkg_failed.append((modname, f"{type(e).__name__}: {e}"))

    return idx, report


def discover(workspace: Path | None = None) -> Index:
    """Discover analyzers from workspace and package; workspace overrides package by label."""
    idx, _ = discover_with_report(workspace)
    return idx


@lru_cache(maxsize=1)
def default_index() -> Index:
    """Packaged analyzers only, discovered once per process."""
    return discover(None)


def enabled_labels(index: Index) -> list[str]:
    """
    Profile filtering via the ANALYZERS table: { TOKEN: true/false }
      * if any True present → allowlist
      * else blacklist False
    """
    toggles = CFG("ANALYZERS", {}) or {}
    toggles = {str(k).upper(): bool(v) for k, v in toggles.items() if isinstance(v, bool)}

    allow = {k for k, v in toggles.items() if v}
    deny = {k for k, v in toggles.items() if not v}

    def label_enabled(lbl: str) -> bool:
        tok = (index.label_to_token.get(lbl) or token(lbl)).upper()
        if allow:
            return tok in allow
        return tok not in deny

    return [lbl for lbl in index.funcs if label_enabled(lbl)]
