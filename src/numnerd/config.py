# src/numnerd/config.py
"""
Profiles: TOML files named <profile>.toml, looked up in the workspace first
and in the package second. An optional [PROFILE] table carries the display
name and a one-line description; every other table is a settings section
(see profiles/default.toml for all keys).
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any

from numnerd.utility import UserInputError
from numnerd.workspace import workspace_dir

DEFAULT_PROFILE = "default"


@dataclass(frozen=True)
class Settings:
    data: dict[str, Any]          # settings sections, [PROFILE] removed
    name: str
    description: str = ""
    source: Path | None = None

    def as_dict(self) -> dict[str, Any]:
        return self.data


def profile_path(name: str) -> Path | None:
    """Workspace profile first, then the packaged copy; None if neither exists."""
    p = workspace_dir() / "profiles" / f"{name}.toml"
    if p.is_file():
        return p
    with as_file(pkg_files("numnerd") / "profiles" / f"{name}.toml") as real:
        real = Path(real)
        return real if real.is_file() else None


def has_profile(name: str) -> bool:
    return profile_path(name) is not None


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        # the message already ends with "(at line L, column C)"
        raise UserInputError(f"reading {path.name}: {e}.") from None


def load_settings(name: str | None = None) -> Settings:
    """
    Load a profile (default 'default'). The ANALYZERS table keeps only
    boolean entries. Raises FileNotFoundError for an unknown profile and
    UserInputError for malformed TOML.
    """
    name = name or DEFAULT_PROFILE
    path = profile_path(name)
    if path is None:
        raise FileNotFoundError(f"Profile '{name}' not found in {workspace_dir() / 'profiles'}")

    data = _read_toml(path)
    meta = data.pop("PROFILE", None) or {}
    toggles = data.get("ANALYZERS") or {}
    data["ANALYZERS"] = {str(k): v for k, v in toggles.items() if isinstance(v, bool)}

    return Settings(
        data=data,
        name=str(meta.get("name") or path.stem),
        description=" ".join(str(meta.get("description", "")).split()),
        source=path,
    )


def list_profiles() -> list[tuple[str, str]]:
    """(name, description) for every workspace profile, sorted by name."""
    items: list[tuple[str, str]] = []
    for p in (workspace_dir() / "profiles").glob("*.toml"):
        try:
            s = load_settings(p.stem)
            items.append((s.name, s.description or "(no description)"))
        except UserInputError:
            items.append((p.stem, "(unreadable)"))
    return sorted(items, key=lambda t: t[0].lower())
