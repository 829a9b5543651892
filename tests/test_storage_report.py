import json
from datetime import date
from pathlib import Path

import pandas as pd
import pytest

from argue_dashboard.dashboard import build_dashboard
from argue_dashboard.models import AgentStats, AggregateStats, DebateStatus, DebateSummary, ParticipantRecord, PlatformStats
from argue_dashboard.report import _md_table, render_report, write_report
from argue_dashboard.storage import save_snapshot

ETH = 10 ** 18
ALICE = "0x" + "a1" * 20
BOB = "0x" + "b0" * 20
SMALL = "0x" + "01" * 20
BIG = "0x" + "02" * 20


def _data():
    return build_dashboard(
        PlatformStats(2, 1, 0, 1, 0),
        AggregateStats(12 * ETH, ETH, 4, 2),
        [
            DebateSummary(SMALL, ALICE, 0, DebateStatus.ACTIVE, ETH, ETH, 0, 1, 1),
            DebateSummary(BIG, BOB, 0, DebateStatus.RESOLVED, 5 * ETH, 5 * ETH, ETH, 1, 1),
        ],
        [ParticipantRecord(ALICE, 3, 2 * ETH), ParticipantRecord(BOB, 1, ETH)],
        [AgentStats(ALICE, 0, 2 * ETH, 2, 0, -ETH, 0), AgentStats(BOB, 3 * ETH, ETH, 1, 1, 2 * ETH, 10_000)],
        {ALICE.upper()},
    )


def test_save_snapshot_writes_run_and_latest(tmp_path: Path):
    run_dir = save_snapshot(_data(), str(tmp_path), date(2024, 1, 2), ["csv", "json"])

    assert run_dir == tmp_path / "runs" / "2024-01-02"
    for folder in (run_dir, tmp_path / "latest"):
        assert (folder / "debates.csv").exists()
        assert (folder / "agents.json").exists()
        stats = json.loads((folder / "stats.json").read_text())
        assert stats["total_volume"] == "12"
        assert stats["registered_not_bet"] == 0

    debates = pd.read_csv(run_dir / "debates.csv")
    assert debates["address"].tolist() == [SMALL, BIG]
    meta = json.loads((run_dir / "meta.json").read_text())
    assert meta["debates"] == 2 and meta["agents"] == 2


def test_save_snapshot_rejects_unknown_format(tmp_path: Path):
    with pytest.raises(ValueError):
        save_snapshot(_data(), str(tmp_path), date(2024, 1, 2), ["xlsx"])


def test_report_sorts_for_display_only(tmp_path: Path):
    data = _data()
    md = render_report(data, as_of="2024-01-02")

    assert md.index(BIG[:6] + "..." + BIG[-4:]) < md.index(SMALL[:6] + "..." + SMALL[-4:])
    bob_row = md.index("| 1    | " + BOB[:6])
    assert bob_row > 0
    assert "100.0%" in md
    # inputs untouched
    assert [d.address for d in data.debates] == [SMALL, BIG]

    path = write_report(data, tmp_path, as_of="2024-01-02")
    assert path.read_text(encoding="utf-8") == md


def test_md_table_pads_columns():
    table = _md_table([["abc", "1"], ["d", "2345"]], ["h", "num"])

    assert table.splitlines() == [
        "| h   | num  |",
        "| --- | ---- |",
        "| abc | 1    |",
        "| d   | 2345 |",
    ]
    assert _md_table([], ["h"]) == "_(no rows)_\n"
