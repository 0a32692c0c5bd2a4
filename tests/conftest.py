# tests/conftest.py
from __future__ import annotations

import sys

import pytest

from numnerd import runtime
from numnerd.registry import discover


@pytest.fixture(autouse=True)
def isolated_workspace(tmp_path, monkeypatch):
    """Every test gets an empty workspace and a default Runtime."""
    ws = tmp_path / "workspace"
    monkeypatch.setenv("NUMNERD_HOME", str(ws))
    monkeypatch.delenv("NUMNERD_DEV", raising=False)
    limit = sys.get_int_max_str_digits()
    runtime.reset()
    yield ws
    runtime.reset()
    sys.set_int_max_str_digits(limit)


@pytest.fixture(scope="session")
def index():
    """Packaged analyzers, discovered once."""
    return discover(None)
