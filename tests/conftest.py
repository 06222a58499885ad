"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from config_utils import clear_settings_cache

_ENV_PREFIXES = ("CORRELATION_", "ENGINE__", "REPORT__", "LOGGING__")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Run every test with default settings: no env overrides and no `.env` file."""
    for key in list(os.environ):
        if key.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def write_csv(tmp_path: Path):
    """Write text to a file under tmp_path and return its path."""

    def _write(text: str, name: str = "data.csv", encoding: str = "utf-8") -> Path:
        path = tmp_path / name
        path.write_bytes(text.encode(encoding))
        return path

    return _write


@pytest.fixture
def duplicate_fixture() -> tuple[list[int], list[int]]:
    """1..10 against 10..1, followed by four observations that create ties in both samples."""
    x = list(range(1, 11)) + [2, 7, 1, 11]
    y = list(range(10, 0, -1)) + [5, 3, 11, 6]
    return x, y
