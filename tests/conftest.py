"""Shared fixtures: isolated databases, config and logger state."""
import logging
import sys
from pathlib import Path

import pytest

# Ensure src is on path for direct imports during testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point every default-path lookup at a throwaway database."""
    path = tmp_path / "ledger.db"
    monkeypatch.setenv("EDUPASS_DB_PATH", str(path))
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Config loader reading from tmp_path instead of ~/.edupass/config."""
    from edupass.utils.config_loader import config_loader

    config_dir = tmp_path / "config"
    monkeypatch.setattr(config_loader, "config_dir", config_dir)
    monkeypatch.setattr(config_loader, "config_file", config_dir / "ledger.yaml")
    monkeypatch.setattr(config_loader, "config", None)
    return config_loader


@pytest.fixture(autouse=True)
def _reset_edupass_logger():
    yield
    # CLI runs bind handlers to captured streams that are closed afterwards
    logging.getLogger("edupass").handlers = []
