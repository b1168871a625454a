"""Tests for the volscan CLI."""

import json
from decimal import Decimal

import pytest

from volscan import cli
from volscan.models import ScanResult


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("COVALENT_API_KEY", raising=False)


def test_missing_api_key_exits_2(capsys):
    code = cli.main(["volume", "--chain", "1", "--address", "0xabc"])

    assert code == 2
    assert "Missing API Key" in capsys.readouterr().out


@pytest.mark.parametrize("name", ["VOLSCAN_MAX_PAGES", "VOLSCAN_DEADLINE_SECONDS"])
def test_invalid_setting_exits_2(monkeypatch, capsys, name):
    monkeypatch.setenv("COVALENT_API_KEY", "k")
    monkeypatch.setenv(name, "lots")

    code = cli.main(["volume", "--chain", "1", "--address", "0xabc"])

    assert code == 2
    assert name in capsys.readouterr().out


def test_volume_json(monkeypatch, capsys):
    async def fake_scan_chain(chain, address, settings=None):
        assert (chain, address) == ("base", "0xabc")
        return ScanResult(volume=Decimal("12.5"), tx_count=3, trace=("[transfers_v2] page 0: $12.50 (3 items)",))

    monkeypatch.setenv("COVALENT_API_KEY", "k")
    monkeypatch.setattr(cli, "scan_chain", fake_scan_chain)

    code = cli.main(["volume", "--chain", "base", "--address", "0xabc", "--json", "--trace"])

    assert code == 0
    assert json.loads(capsys.readouterr().out) == {
        "volume": 12.5,
        "txCount": 3,
        "trace": ["[transfers_v2] page 0: $12.50 (3 items)"],
    }


def test_wallet_text(monkeypatch, capsys):
    async def fake_scan_wallet(address, chains, settings=None):
        assert chains == ["ethereum", "solana"]
        return {
            "ethereum": ScanResult(volume=Decimal(2000), tx_count=10),
            "solana": ScanResult.failed("Timed out"),
        }

    monkeypatch.setenv("COVALENT_API_KEY", "k")
    monkeypatch.setattr(cli, "scan_wallet", fake_scan_wallet)

    code = cli.main(["wallet", "--address", "0xabc", "--chains", "ethereum, solana,"])

    out = capsys.readouterr().out
    assert code == 0
    assert "ethereum: $2,000.00 (10 txs)" in out
    assert "solana: $0.00 (0 txs) error=Timed out" in out
    assert "total: $2,000.00" in out
    assert "airdrop potential: Low ($50)" in out
