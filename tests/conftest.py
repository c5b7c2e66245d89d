"""Global test fixtures."""

import os

import pytest


@pytest.fixture(autouse=True)
def _isolate_remedy_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep REMEDY_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("REMEDY_"):
            monkeypatch.delenv(name)
