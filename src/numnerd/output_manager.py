# output_manager.py

from __future__ import annotations

import os

from numnerd.utility import strip_ansi
from numnerd.workspace import workspace_dir


def resolve_output_path(path: str, workspace_root: str | os.PathLike) -> str:
    """
    Resolve user-provided output path.

    - '~' expanded to user home
    - Absolute paths unchanged
    - Relative paths are relative to workspace_root
    """
    if not path:
        raise ValueError("Output path is empty")
    path = os.path.expanduser(path)
    if os.path.isabs(path):
        return os.path.normpath(path)
    return os.path.normpath(os.path.join(workspace_root, path))


class OutputManager:
    """
    Handles all printing/output, to screen and/or an append-only file.

        om = OutputManager(output_file="results/all.txt")
        om.write("Hello")   # prints, and appends to the file without color codes
        om.close()          # blank line between runs
    """

    def __init__(self, output_file: str | None = None, quiet: bool = False):
        self.quiet = quiet
        self._buffer: list[str] = []
        self._path: str | None = None

        if output_file:
            self._path = resolve_output_path(output_file, workspace_dir())
            parent = os.path.dirname(self._path)
            if parent:
                os.makedirs(parent, exist_ok=True)

    @property
    def path(self) -> str | None:
        return self._path

    def write(self, *args, sep: str = " ", end: str = "\n") -> None:
        """Write to screen and file (if configured)."""
        text = sep.join(str(a) for a in args) + end
        self._buffer.append(text)

        if not self.quiet:
            print(text, end="")

        if self._path:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write(strip_ansi(text))

    def getvalue(self) -> str:
        """Returns everything written (with color codes)."""
        return "".join(self._buffer)

    def close(self) -> None:
        if self._path and self._buffer:
            with open(self._path, "a", encoding="utf-8") as fh:
                fh.write("\n")   # one empty line between runs

    def __enter__(self) -> OutputManager:
        return self

    def __exit__(self, *exc) -> None:
        self.close()
