"""Display helpers for fixed-point amounts and status codes."""
from __future__ import annotations

from datetime import datetime, timezone

from .models import DebateStatus

TOKEN_DECIMALS = 18

_STATUS_LABELS = {
    DebateStatus.ACTIVE: "Active",
    DebateStatus.RESOLVING: "Resolving",
    DebateStatus.RESOLVED: "Resolved",
    DebateStatus.UNDETERMINED: "Undetermined",
}


def format_units(value: int, decimals: int = TOKEN_DECIMALS) -> str:
    """Render a fixed-point integer as a decimal string, exactly (no rounding)."""
    v = int(value)
    whole, frac = divmod(abs(v), 10 ** decimals)
    frac_s = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    s = f"{whole}.{frac_s}" if frac_s else str(whole)
    return "-" + s if v < 0 else s


def status_label(status: int) -> str:
    try:
        return _STATUS_LABELS[DebateStatus(int(status))]
    except ValueError:
        return "Unknown"


def win_rate_percent(win_rate_bps: int) -> float:
    return int(win_rate_bps) / 100


def timestamp_to_datetime(ts: int) -> datetime:
    return datetime.fromtimestamp(int(ts), tz=timezone.utc)
