import json
from pathlib import Path

from argue_dashboard import cli
from argue_dashboard.chain.memory import MemoryChain
from argue_dashboard.reader import BatchReader

FACTORY = "0x0692eC85325472Db274082165620829930f2c1F9"
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
D1 = "0x" + "01" * 20
D2 = "0x" + "02" * 20


def _patch_connect(monkeypatch):
    chain = MemoryChain(minted=[ALICE])
    chain.add_debate(D1, ALICE, side_a=[(ALICE, 1), (BOB, 2)])
    chain.add_debate(D2, ALICE, side_b=[(BOB, 3)], status=1)
    seen = {}

    def fake_connect(cfg):
        seen["cfg"] = cfg
        return BatchReader(FACTORY, chain, chain), chain, chain

    monkeypatch.setattr(cli, "connect", fake_connect)
    return chain, seen


def test_creators_defaults_to_factory_list(monkeypatch, capsys):
    _patch_connect(monkeypatch)

    cli.main(["creators"])

    assert json.loads(capsys.readouterr().out) == [ALICE]


def test_participants_with_explicit_debates_and_cap(monkeypatch, capsys):
    _patch_connect(monkeypatch)

    cli.main(["participants", D2, D1, "--max", "1"])

    rows = json.loads(capsys.readouterr().out)
    assert rows == [{"participant": BOB, "total_arguments_written": 2, "total_amount_staked": 5}]


def test_snapshot_writes_outputs(monkeypatch, tmp_path: Path):
    _, seen = _patch_connect(monkeypatch)

    cli.main(["--backend", "local", "snapshot", "--out", str(tmp_path), "--formats", "csv"])

    assert seen["cfg"].run.formats == ("csv",)
    runs = list((tmp_path / "runs").iterdir())
    assert len(runs) == 1
    assert (runs[0] / "debates.csv").exists()
    assert (runs[0] / "dashboard_report.md").exists()
    assert (tmp_path / "latest" / "stats.json").exists()
