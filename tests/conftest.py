# tests/conftest.py
import json
from pathlib import Path

import pytest


@pytest.fixture
def genesis_path(tmp_path: Path) -> Path:
    """Genesis with a single funded account A."""
    path = tmp_path / "genesis.json"
    path.write_text(json.dumps({"balances": {"A": 100}}), encoding="utf-8")
    return path


@pytest.fixture
def log_path(tmp_path: Path) -> Path:
    """Empty, pre-existing transaction log."""
    path = tmp_path / "tx.db"
    path.touch()
    return path
