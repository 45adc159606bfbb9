"""Shared fixtures for CLI tests."""

from pathlib import Path

import pytest


@pytest.fixture
def tmp_config_path(tmp_path: Path) -> Path:
    """Provide a temporary config file path."""
    return tmp_path / "loka.yaml"


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path: Path):
    """Keep commands from reading or writing the user's real config."""
    monkeypatch.setenv("LOKA_CONFIG", str(tmp_path / "env-loka.yaml"))
