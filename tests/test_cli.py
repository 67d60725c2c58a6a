# tests/test_cli.py
from pathlib import Path

import pytest
from typer.testing import CliRunner

from warchief import __version__
from warchief.cli.main import app
from warchief.core.canon import encode_tx
from warchief.core.types import Tx
from warchief.crypto.hashing import snapshot_of

runner = CliRunner()


@pytest.fixture
def paths(genesis_path: Path, log_path: Path) -> list:
    return ["--genesis", str(genesis_path), "--log", str(log_path)]


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert f"Version: {__version__}" in result.stdout


def test_balances_default_paths_missing(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WB_GENESIS_PATH", raising=False)
    monkeypatch.delenv("WB_TX_DB_PATH", raising=False)

    result = runner.invoke(app, ["balances", "list"])
    assert result.exit_code == 1
    assert "not found" in result.stdout.lower()


def test_balances_list(paths: list, log_path: Path):
    log_path.write_bytes(encode_tx(Tx("A", "B", 30)) + b"\n")

    result = runner.invoke(app, paths + ["balances", "list"])
    assert result.exit_code == 0
    assert "Balances" in result.stdout
    assert "70" in result.stdout
    assert "30" in result.stdout
    assert snapshot_of(log_path.read_bytes()).hex() in result.stdout


def test_balances_list_from_env(genesis_path: Path, log_path: Path, monkeypatch):
    monkeypatch.setenv("WB_GENESIS_PATH", str(genesis_path))
    monkeypatch.setenv("WB_TX_DB_PATH", str(log_path))

    result = runner.invoke(app, ["balances", "list"])
    assert result.exit_code == 0
    assert "100" in result.stdout


def test_balances_list_corrupt_log(paths: list, log_path: Path):
    log_path.write_bytes(b"garbage\n")

    result = runner.invoke(app, paths + ["balances", "list"])
    assert result.exit_code == 1
    assert "failed to load state" in result.stdout.lower()


def test_tx_add_persists(paths: list, log_path: Path):
    result = runner.invoke(app, paths + ["tx", "add", "--from", "A", "--to", "B", "--value", "30"])
    assert result.exit_code == 0
    assert "successfully added" in result.stdout

    content = log_path.read_bytes()
    assert content == encode_tx(Tx("A", "B", 30)) + b"\n"
    assert snapshot_of(content).hex() in result.stdout


def test_tx_add_reward(paths: list, log_path: Path):
    result = runner.invoke(
        app, paths + ["tx", "add", "--from", "", "--to", "miner", "--value", "700", "--data", "reward"]
    )
    assert result.exit_code == 0
    assert log_path.read_bytes() == encode_tx(Tx("", "miner", 700, "reward")) + b"\n"


def test_tx_add_insufficient_balance(paths: list, log_path: Path):
    result = runner.invoke(app, paths + ["tx", "add", "--from", "A", "--to", "B", "--value", "1000"])
    assert result.exit_code == 1
    assert "rejected" in result.stdout.lower()
    assert log_path.read_bytes() == b""


def test_verify_valid_log(paths: list, log_path: Path):
    log_path.write_bytes(encode_tx(Tx("A", "B", 30)) + b"\n")
    expected = snapshot_of(log_path.read_bytes()).hex()

    result = runner.invoke(app, paths + ["verify", "--snapshot", expected])
    assert result.exit_code == 0
    assert "valid" in result.stdout.lower()


def test_verify_reports_failures(paths: list, log_path: Path):
    log_path.write_bytes(b"garbage\n" + encode_tx(Tx("A", "B", 500)) + b"\n")

    result = runner.invoke(app, paths + ["verify"])
    assert result.exit_code == 1
    assert "parse" in result.stdout
    assert "balance" in result.stdout


def test_verify_snapshot_mismatch(paths: list, log_path: Path):
    result = runner.invoke(app, paths + ["verify", "--snapshot", "00" * 32])
    assert result.exit_code == 1
    assert "snapshot" in result.stdout.lower()


def test_verify_invalid_snapshot_argument(paths: list):
    result = runner.invoke(app, paths + ["verify", "--snapshot", "xyz"])
    assert result.exit_code == 1
    assert "invalid snapshot" in result.stdout.lower()
