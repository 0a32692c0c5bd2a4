# src/numnerd/dataio.py
from __future__ import annotations

from functools import lru_cache
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

from numnerd.workspace import workspace_dir

# Longer names would exceed common filesystem limits; no snippet is that specific.
_TRIVIA_MAX_BITS = 512


def data_path(rel: str) -> Path:
    """
    Resolve a data file path with override semantics:

      1) <Workspace>/data/<rel>  (if present)
      2) Packaged resource: numnerd/data/<rel>

    Returns a filesystem Path you can open (it may not exist).
    """
    rel = rel.lstrip("/\\")
    p = workspace_dir() / "data" / rel
    if p.exists():
        return p

    ref = pkg_files("numnerd") / "data" / rel
    # materialize to a real path (needed for zip/egg resources)
    with as_file(ref) as real:
        return Path(real)


def load_trivia(n: int) -> str | None:
    """
    Return the static HTML snippet for n from data/trivia/<n>.html, or None.

    The file name is built from the integer itself, so nothing from the raw
    request path can reach the filesystem lookup.
    """
    if n < 0 or n.bit_length() > _TRIVIA_MAX_BITS:
        return None
    p = data_path(f"trivia/{int(n)}.html")
    try:
        return p.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None


@lru_cache(maxsize=1)
def load_mersenne_exponents() -> frozenset[int]:
    """
    Exponents p of the known Mersenne primes 2^p − 1, from
    data/mersenne_exponents.txt (one per line, '#' comments).
    A missing file just means no shortcut.
    """
    exps: set[int] = set()
    try:
        with data_path("mersenne_exponents.txt").open("r", encoding="utf-8") as f:
            for raw_line in f:
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                try:
                    exps.add(int(line))
                except ValueError:
                    continue
    except FileNotFoundError:
        pass
    return frozenset(exps)
