"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Run every command from an empty cwd with no global config."""
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    with patch("sqlprep.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "none.yaml"):
        yield
