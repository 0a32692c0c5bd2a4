from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("numnerd")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .collector import collect, collect_sync
from .config import has_profile, load_settings
from .facts import Fact, FactCollection
from .markup import render, render_text
from .registry import analyzer, discover
from .runtime import APPLY, CFG
from .utility import UserInputError, parse_nonnegative
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "Fact",
    "FactCollection",
    "UserInputError",
    "__version__",
    "analyzer",
    "collect",
    "collect_sync",
    "discover",
    "has_profile",
    "load_settings",
    "parse_nonnegative",
    "render",
    "render_text",
    "workspace_dir"
]
