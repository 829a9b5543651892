from __future__ import annotations

import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Dict, Sequence

import pandas as pd

from .dashboard import DashboardData

LOGGER = logging.getLogger(__name__)

SUPPORTED_FORMATS = ("csv", "json", "parquet")


def prepare_run_dir(out_dir: str, as_of: date) -> Path:
    run_dir = Path(out_dir) / "runs" / as_of.isoformat()
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def write_meta(run_dir: Path, meta: dict) -> None:
    p = run_dir / "meta.json"
    p.write_text(json.dumps(meta, indent=2, sort_keys=True), encoding="utf-8")


def to_frames(data: DashboardData) -> Dict[str, pd.DataFrame]:
    debates = pd.DataFrame([asdict(d) for d in data.debates])
    agents = pd.DataFrame([asdict(a) for a in data.agents])
    return {"debates": debates, "agents": agents}


def _write_frame(df: pd.DataFrame, path_stem: Path, fmt: str) -> Path:
    path = path_stem.with_suffix("." + fmt)
    if fmt == "csv":
        df.to_csv(path, index=False)
    elif fmt == "json":
        df.to_json(path, orient="records", indent=2, date_format="iso")
    elif fmt == "parquet":
        df.to_parquet(path, index=False)
    else:
        raise ValueError(f"Unsupported format {fmt!r}; expected one of {SUPPORTED_FORMATS}")
    return path


def _write_snapshot_dir(target: Path, data: DashboardData, frames: Dict[str, pd.DataFrame], formats: Sequence[str]) -> None:
    target.mkdir(parents=True, exist_ok=True)
    (target / "stats.json").write_text(json.dumps(asdict(data.stats), indent=2), encoding="utf-8")
    for name, df in frames.items():
        for fmt in formats:
            _write_frame(df, target / name, fmt)


def save_snapshot(data: DashboardData, out_dir: str, as_of: date, formats: Sequence[str]) -> Path:
    bad = [f for f in formats if f not in SUPPORTED_FORMATS]
    if bad:
        raise ValueError(f"Unsupported formats {bad}; expected a subset of {SUPPORTED_FORMATS}")

    run_dir = prepare_run_dir(out_dir, as_of)
    frames = to_frames(data)

    _write_snapshot_dir(run_dir, data, frames, formats)
    _write_snapshot_dir(Path(out_dir) / "latest", data, frames, formats)
    write_meta(
        run_dir,
        {
            "as_of": as_of.isoformat(),
            "debates": len(data.debates),
            "agents": len(data.agents),
            "formats": list(formats),
        },
    )
    LOGGER.info("Snapshot saved to %s", run_dir)
    return run_dir
