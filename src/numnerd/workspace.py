"""
User workspace: $NUMNERD_HOME, else ~/Documents/Numnerd.

    profiles/    *.toml; seeded from the package, shadow the packaged profiles
    data/        trivia snippets and tables; seeded, shadow the packaged data
    analyzers/   user analyzer modules; starts empty
"""

from __future__ import annotations

import os
import shutil
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path

# section -> which packaged files are copied into it
SEEDED = {"profiles": "*.toml", "data": "**/*.*"}
SECTIONS = (*SEEDED, "analyzers")


def workspace_dir() -> Path:
    home = os.environ.get("NUMNERD_HOME") or Path.home() / "Documents" / "Numnerd"
    return Path(home).expanduser().resolve()


def _seed_section(section: str, pattern: str, dest: Path, overwrite: bool) -> int:
    copied = 0
    with as_file(pkg_files("numnerd") / section) as src:
        src = Path(src)
        for path in sorted(src.glob(pattern)):
            if not path.is_file() or path.name.startswith("."):
                continue
            target = dest / path.relative_to(src)
            if target.exists() and not overwrite:
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(path, target)
            copied += 1
    return copied


def seed_workspace(*, overwrite: bool = False) -> tuple[Path, dict[str, int]]:
    """
    Create the workspace sections and copy packaged profiles and data into it.
    Existing files are kept unless overwrite=True (developer use, guarded in
    the CLI). Returns (workspace, {section: files copied}).
    """
    root = workspace_dir()
    for section in SECTIONS:
        (root / section).mkdir(parents=True, exist_ok=True)
    copied = {
        section: _seed_section(section, pattern, root / section, overwrite)
        for section, pattern in SEEDED.items()
    }
    return root, copied
